"""Graph finalization and QA phase."""

from typing import Any, Dict

from ..graph_model import WARNING_STRUCTURAL
from ..graph_orchestrator import MapGraphOrchestrator
from ..pipeline import PipelinePhase
from ..sections import SectionStore
from .ingestion import TRIGGERS_SECTION


class GraphFinalizationPhase(PipelinePhase):
    phase_name = "finalization"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        orchestrator: MapGraphOrchestrator = context["orchestrator"]
        sections: SectionStore = context["sections"]

        linked_edges = orchestrator.link_neighbours()
        if not sections.has_section(TRIGGERS_SECTION):
            orchestrator.add_warning(WARNING_STRUCTURAL, "There are no triggers in this map!")

        qa_report = {
            **orchestrator.counts(),
            "linked_edge_count": linked_edges,
            "dangling_edge_count": len(orchestrator.state.edges) - linked_edges,
        }
        return {"validation_report": qa_report}
