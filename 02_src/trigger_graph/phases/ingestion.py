"""Map ingestion phase: read map text and build the section store."""

import logging
from pathlib import Path
from typing import Any, Dict

from ..graph_model import WARNING_STRUCTURAL
from ..graph_orchestrator import MapGraphOrchestrator
from ..pipeline import PipelinePhase
from ..sections import SectionStore

log = logging.getLogger(__name__)

TRIGGERS_SECTION = "Triggers"
TAGS_SECTION = "Tags"
EVENTS_SECTION = "Events"
ACTIONS_SECTION = "Actions"
VARIABLES_SECTION = "VariableNames"

MAP_SECTIONS = (
    TRIGGERS_SECTION,
    TAGS_SECTION,
    EVENTS_SECTION,
    ACTIONS_SECTION,
    VARIABLES_SECTION,
)


class MapIngestionPhase(PipelinePhase):
    phase_name = "ingestion"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        orchestrator: MapGraphOrchestrator = context["orchestrator"]
        map_text = context.get("map_text")
        if map_text is None:
            map_text = self._read_map(context.get("input_path"), context.get("encoding", "utf-8"))

        sections = SectionStore(map_text)
        for key in sections.duplicate_keys.get(TRIGGERS_SECTION, []):
            orchestrator.add_warning(WARNING_STRUCTURAL, f"ID {key} duplicated!", subject=key)

        ingestion_output = {
            "line_count": sections.text.count("\n") + 1 if sections.text else 0,
            "section_sizes": {
                name: len(sections.section(name)) for name in MAP_SECTIONS if sections.has_section(name)
            },
            "missing_sections": [name for name in MAP_SECTIONS if not sections.has_section(name)],
        }
        log.debug("ingested map: %s", ingestion_output)
        return {"map_text": sections.text, "sections": sections, "ingestion_output": ingestion_output}

    @staticmethod
    def _read_map(input_path: Any, encoding: str) -> str:
        if not input_path:
            raise ValueError("Either map_text or input_path must be provided.")
        path = Path(str(input_path))
        return path.read_text(encoding=encoding, errors="replace")
