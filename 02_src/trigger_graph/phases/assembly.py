"""Trigger assembly phase powered by a LangGraph workflow."""

import logging
from typing import Any, Dict, List

from langgraph.graph import END, START, StateGraph
from typing_extensions import TypedDict

from ..decoding import DecodeResult, decode_actions, decode_events, parse_int
from ..graph_model import (
    EDGE_LINK,
    NO_LINK,
    WARNING_RECORD_DECODE,
    WARNING_STRUCTURAL,
    GraphEdge,
    TagRecord,
    TriggerNode,
)
from ..graph_orchestrator import MapGraphOrchestrator
from ..pipeline import PipelinePhase
from ..sections import SectionStore
from ..trigger_groups import TriggerGroups
from .ingestion import ACTIONS_SECTION, EVENTS_SECTION, TRIGGERS_SECTION

log = logging.getLogger(__name__)


class AssemblyState(TypedDict):
    trigger_fields: Dict[str, List[str]]
    event_rows: Dict[str, str]
    action_rows: Dict[str, str]
    tags: Dict[str, TagRecord]
    groups: TriggerGroups
    candidates: List[Dict[str, Any]]
    assembled: List[Dict[str, Any]]


def _flag(fields: List[str], index: int) -> bool:
    if index >= len(fields):
        return False
    return bool(parse_int(fields[index]))


class TriggerAssemblyPhase(PipelinePhase):
    phase_name = "assembly"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        orchestrator: MapGraphOrchestrator = context["orchestrator"]
        sections: SectionStore = context["sections"]

        workflow = self._build_workflow()
        result_state = workflow.invoke(
            {
                "trigger_fields": {
                    trigger_id: sections.fields(TRIGGERS_SECTION, trigger_id)
                    for trigger_id in sections.section(TRIGGERS_SECTION)
                },
                "event_rows": sections.section(EVENTS_SECTION),
                "action_rows": sections.section(ACTIONS_SECTION),
                "tags": context.get("tags", {}),
                "groups": context["trigger_groups"],
                "candidates": [],
                "assembled": [],
            }
        )

        assembled = result_state.get("assembled", [])
        self._apply_to_graph(orchestrator, assembled)
        return {
            "assembly_output": {
                "trigger_count": sum(1 for item in assembled if item["node"] is not None),
                "skipped_triggers": [item["id"] for item in assembled if item["node"] is None],
            }
        }

    def _build_workflow(self):
        graph = StateGraph(AssemblyState)
        graph.add_node("select_triggers", self._select_triggers)
        graph.add_node("decode_streams", self._decode_streams)
        graph.add_node("assemble_nodes", self._assemble_nodes)
        graph.add_edge(START, "select_triggers")
        graph.add_edge("select_triggers", "decode_streams")
        graph.add_edge("decode_streams", "assemble_nodes")
        graph.add_edge("assemble_nodes", END)
        return graph.compile()

    def _select_triggers(self, state: AssemblyState) -> Dict[str, Any]:
        groups = state["groups"]
        tags = state.get("tags", {})
        candidates: List[Dict[str, Any]] = []
        for trigger_id, fields in state.get("trigger_fields", {}).items():
            group_tags = groups.tags_for(trigger_id)
            candidate: Dict[str, Any] = {"id": trigger_id, "fields": fields, "tags": group_tags}
            if group_tags:
                first_tag = tags.get(group_tags[0])
                candidate["repeat"] = first_tag.repeat if first_tag is not None else None
            candidates.append(candidate)
        return {"candidates": candidates}

    def _decode_streams(self, state: AssemblyState) -> Dict[str, Any]:
        event_rows = state.get("event_rows", {})
        action_rows = state.get("action_rows", {})
        candidates: List[Dict[str, Any]] = []
        for candidate in state.get("candidates", []):
            if not candidate["tags"]:
                candidates.append(candidate)
                continue
            trigger_id = candidate["id"]
            candidates.append(
                {
                    **candidate,
                    "events": decode_events(event_rows.get(trigger_id), trigger_id),
                    "actions": decode_actions(action_rows.get(trigger_id), trigger_id),
                }
            )
        return {"candidates": candidates}

    def _assemble_nodes(self, state: AssemblyState) -> Dict[str, Any]:
        assembled: List[Dict[str, Any]] = []
        for candidate in state.get("candidates", []):
            trigger_id = candidate["id"]
            if not candidate["tags"]:
                assembled.append(
                    {
                        "id": trigger_id,
                        "node": None,
                        "edges": [],
                        "global_refs": [],
                        "warnings": [(WARNING_STRUCTURAL, f"Trigger {trigger_id} doesn't have any tags!")],
                    }
                )
                continue

            fields = candidate["fields"] + [""] * max(0, 3 - len(candidate["fields"]))
            events: DecodeResult = candidate["events"]
            actions: DecodeResult = candidate["actions"]
            link = fields[1] or NO_LINK
            node = TriggerNode(
                id=trigger_id,
                label=fields[2],
                house=fields[0],
                link=link,
                repeat=candidate.get("repeat"),
                disabled=_flag(fields, 3),
                easy=_flag(fields, 4),
                normal=_flag(fields, 5),
                hard=_flag(fields, 6),
                tags=list(candidate["tags"]),
                events=list(events.records),
                actions=list(actions.records),
            )

            warnings = []
            reasons = [result.error for result in (events, actions) if not result.ok]
            if reasons:
                warnings.append(
                    (
                        WARNING_RECORD_DECODE,
                        f"Trigger {trigger_id} has error in events or actions: {'; '.join(reasons)}",
                    )
                )

            edges = list(events.edges) + list(actions.edges)
            if node.has_link:
                edges.append(GraphEdge(kind=EDGE_LINK, source=trigger_id, target=link, directed=False))

            global_refs = list(events.global_refs)
            global_refs += [ref for ref in actions.global_refs if ref not in global_refs]
            assembled.append(
                {
                    "id": trigger_id,
                    "node": node,
                    "edges": edges,
                    "global_refs": global_refs,
                    "warnings": warnings,
                }
            )
        return {"assembled": assembled}

    @staticmethod
    def _apply_to_graph(orchestrator: MapGraphOrchestrator, assembled: List[Dict[str, Any]]) -> None:
        for item in assembled:
            for kind, message in item["warnings"]:
                orchestrator.add_warning(kind, message, subject=item["id"])
            for global_id in item["global_refs"]:
                orchestrator.ensure_global_variable(global_id)
            for edge in item["edges"]:
                orchestrator.add_edge(edge)
            if item["node"] is not None:
                orchestrator.add_node(item["node"])
        log.debug("assembled %d trigger candidates", len(assembled))
