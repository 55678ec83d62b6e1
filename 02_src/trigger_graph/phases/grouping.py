"""Trigger grouping phase: link chains and tag attachment."""

from typing import Any, Dict, List

from ..decoding import parse_int
from ..graph_model import NO_LINK, WARNING_STRUCTURAL, TagRecord
from ..graph_orchestrator import MapGraphOrchestrator
from ..pipeline import PipelinePhase
from ..sections import SectionStore
from ..trigger_groups import TriggerGroups
from .ingestion import TAGS_SECTION, TRIGGERS_SECTION


def parse_tag(tag_id: str, fields: List[str]) -> TagRecord:
    fields = fields + [""] * (3 - len(fields))
    return TagRecord(id=tag_id, repeat=parse_int(fields[0]), name=fields[1], trigger_ref=fields[2])


def trigger_link(fields: List[str]) -> str:
    link = fields[1] if len(fields) > 1 else ""
    return link or NO_LINK


class TriggerGroupingPhase(PipelinePhase):
    phase_name = "grouping"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        orchestrator: MapGraphOrchestrator = context["orchestrator"]
        sections: SectionStore = context["sections"]

        groups = TriggerGroups()
        groups.initialize(
            (trigger_id, trigger_link(sections.fields(TRIGGERS_SECTION, trigger_id)))
            for trigger_id in sections.section(TRIGGERS_SECTION)
        )

        tags: Dict[str, TagRecord] = {}
        dropped: List[str] = []
        for tag_id in sections.section(TAGS_SECTION):
            tag = parse_tag(tag_id, sections.fields(TAGS_SECTION, tag_id))
            tags[tag_id] = tag
            if groups.attach_tag(tag_id, tag.trigger_ref) is None:
                dropped.append(tag_id)
                orchestrator.add_warning(
                    WARNING_STRUCTURAL,
                    f"Tag {tag_id} refers to non-existent trigger!",
                    subject=tag_id,
                )

        # Resolve every trigger once so cyclic chains surface before assembly.
        for trigger_id in sections.section(TRIGGERS_SECTION):
            groups.find(trigger_id)
        for trigger_id in groups.cyclic:
            orchestrator.add_warning(
                WARNING_STRUCTURAL,
                f"Trigger {trigger_id} is part of a cyclic link chain",
                subject=trigger_id,
            )

        return {
            "trigger_groups": groups,
            "tags": tags,
            "grouping_output": {"tag_count": len(tags), "dropped_tags": dropped},
        }
