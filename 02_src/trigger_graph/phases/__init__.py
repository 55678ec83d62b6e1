"""Pipeline phases for map trigger graph building."""

from .assembly import TriggerAssemblyPhase
from .grouping import TriggerGroupingPhase
from .ingestion import MapIngestionPhase
from .reference_resolver import ReferenceResolverPhase, resolve_bundle
from .validation import GraphFinalizationPhase
from .variables import VariableDeclarationPhase

__all__ = [
    "MapIngestionPhase",
    "TriggerGroupingPhase",
    "TriggerAssemblyPhase",
    "VariableDeclarationPhase",
    "GraphFinalizationPhase",
    "ReferenceResolverPhase",
    "resolve_bundle",
]
