"""Core package for the map trigger graph builder."""

from .graph_model import (
    ActionRecord,
    EventRecord,
    GraphEdge,
    MapModel,
    MapWarning,
    TriggerNode,
    VariableNode,
)
from .graph_orchestrator import MapGraphOrchestrator
from .map_builder import build_map_model, run_pipeline
from .phases.reference_resolver import EntityBundle, resolve_bundle
from .pipeline import PipelinePhase, PipelineRunner
from .sections import MergedEntity, RawSection, SectionStore

__all__ = [
    "ActionRecord",
    "EventRecord",
    "GraphEdge",
    "MapModel",
    "MapWarning",
    "TriggerNode",
    "VariableNode",
    "MapGraphOrchestrator",
    "build_map_model",
    "run_pipeline",
    "EntityBundle",
    "resolve_bundle",
    "PipelinePhase",
    "PipelineRunner",
    "MergedEntity",
    "RawSection",
    "SectionStore",
]
