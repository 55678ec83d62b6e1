"""Local variable declaration phase."""

from typing import Any, Dict

from ..decoding import LOCAL_PREFIX
from ..graph_model import VariableNode
from ..graph_orchestrator import MapGraphOrchestrator
from ..pipeline import PipelinePhase
from ..sections import SectionStore
from .ingestion import VARIABLES_SECTION


class VariableDeclarationPhase(PipelinePhase):
    phase_name = "variables"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        orchestrator: MapGraphOrchestrator = context["orchestrator"]
        sections: SectionStore = context["sections"]

        declared = 0
        for variable_id in sections.section(VARIABLES_SECTION):
            fields = sections.fields(VARIABLES_SECTION, variable_id)
            node = VariableNode(
                id=f"{LOCAL_PREFIX}{variable_id}",
                label=fields[0] if fields else "",
                scope="local",
                init_value=fields[1] if len(fields) > 1 else None,
            )
            if orchestrator.add_node(node):
                declared += 1
        return {"variables_output": {"local_count": declared}}
