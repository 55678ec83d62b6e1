"""Map model builder: runs the phase pipeline over one map text."""

from typing import Any, Dict, Iterable, List, Optional

from .graph_model import MapModel
from .graph_orchestrator import MapGraphOrchestrator
from .phases import (
    GraphFinalizationPhase,
    MapIngestionPhase,
    ReferenceResolverPhase,
    TriggerAssemblyPhase,
    TriggerGroupingPhase,
    VariableDeclarationPhase,
)
from .pipeline import PipelinePhase, PipelineRunner


def build_default_phases() -> List[PipelinePhase]:
    return [
        MapIngestionPhase(),
        TriggerGroupingPhase(),
        TriggerAssemblyPhase(),
        VariableDeclarationPhase(),
        GraphFinalizationPhase(),
        ReferenceResolverPhase(),
    ]


def run_pipeline(
    map_text: Optional[str] = None,
    input_path: str = "",
    encoding: str = "utf-8",
    inspect_ids: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """Run every phase with a fresh orchestrator and return the final context."""
    orchestrator = MapGraphOrchestrator()
    initial_context: Dict[str, Any] = {
        "map_text": map_text,
        "input_path": input_path,
        "encoding": encoding,
        "inspect_ids": list(inspect_ids or []),
        "orchestrator": orchestrator,
    }
    runner = PipelineRunner(phases=build_default_phases())
    return runner.run(initial_context)


def build_map_model(map_text: str, inspect_ids: Optional[Iterable[str]] = None) -> MapModel:
    if not isinstance(map_text, str):
        raise TypeError(f"Map text must be str, got {type(map_text).__name__}.")
    context = run_pipeline(map_text=map_text, inspect_ids=inspect_ids)
    orchestrator: MapGraphOrchestrator = context["orchestrator"]
    return orchestrator.to_model(meta=build_meta(context))


def build_meta(context: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "input_path": context.get("input_path", ""),
        "executed_phases": context.get("executed_phases", []),
        "ingestion_report": context.get("ingestion_output", {}),
        "grouping_report": context.get("grouping_output", {}),
        "assembly_report": context.get("assembly_output", {}),
        "validation_report": context.get("validation_report", {}),
        "resolver_report": context.get("resolver_output", {}),
    }
