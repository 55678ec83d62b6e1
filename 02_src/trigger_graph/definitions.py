"""Opcode definition table and plain-text rendering of trigger records."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .decoding import ACTION_PARAM_SLOTS
from .graph_model import ActionRecord, EventRecord, TriggerNode, VariableNode

log = logging.getLogger(__name__)

_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
WAYPOINT_SLOT = ACTION_PARAM_SLOTS - 1

REPEAT_LABELS = {0: "one time OR", 1: "one time AND", 2: "repeating OR"}


@dataclass(frozen=True)
class OpcodeDefinition:
    name: str = "Unknown"
    description: str = ""
    param_arity: Tuple[int, ...] = (0,) * ACTION_PARAM_SLOTS


UNKNOWN_DEFINITION = OpcodeDefinition()


def _parse_entries(raw: Any) -> Dict[int, OpcodeDefinition]:
    if isinstance(raw, list):
        items = list(enumerate(raw))
    elif isinstance(raw, dict):
        items = list(raw.items())
    else:
        return {}

    entries: Dict[int, OpcodeDefinition] = {}
    for key, payload in items:
        if not isinstance(payload, dict):
            continue
        try:
            opcode = int(key)
        except (TypeError, ValueError):
            log.warning("skipping definition with non-numeric opcode %r", key)
            continue
        arity = payload.get("p", payload.get("params", [])) or []
        arity = [int(value) if isinstance(value, (int, float)) else 0 for value in arity]
        arity = (arity + [0] * ACTION_PARAM_SLOTS)[:ACTION_PARAM_SLOTS]
        entries[opcode] = OpcodeDefinition(
            name=str(payload.get("name", UNKNOWN_DEFINITION.name)),
            description=str(payload.get("description", "")),
            param_arity=tuple(arity),
        )
    return entries


@dataclass
class DefinitionTable:
    events: Dict[int, OpcodeDefinition] = field(default_factory=dict)
    actions: Dict[int, OpcodeDefinition] = field(default_factory=dict)

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "DefinitionTable":
        return cls(
            events=_parse_entries(payload.get("events")),
            actions=_parse_entries(payload.get("actions")),
        )

    def event(self, opcode: Optional[int]) -> OpcodeDefinition:
        return self.events.get(opcode, UNKNOWN_DEFINITION) if opcode is not None else UNKNOWN_DEFINITION

    def action(self, opcode: Optional[int]) -> OpcodeDefinition:
        return self.actions.get(opcode, UNKNOWN_DEFINITION) if opcode is not None else UNKNOWN_DEFINITION


def load_definitions(path: Optional[str]) -> DefinitionTable:
    """Load the opcode table; an unreadable file yields an empty table."""
    if not path:
        return DefinitionTable()
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as error:
        log.warning("failed to load event/action definitions from %s: %s", path, error)
        return DefinitionTable()
    if not isinstance(payload, dict):
        log.warning("definition file %s is not a JSON object", path)
        return DefinitionTable()
    return DefinitionTable.from_json(payload)


def decode_waypoint(token: str) -> Optional[int]:
    """Bijective base-26 letters to a zero-based waypoint number (A=0, AA=26)."""
    token = token.strip().upper()
    if not token or any(char not in _ALPHABET for char in token):
        return None
    value = 0
    for char in token:
        value = value * 26 + _ALPHABET.index(char) + 1
    return value - 1


def repeat_label(repeat: Optional[int]) -> str:
    return REPEAT_LABELS.get(repeat, "unknown") if repeat is not None else "unknown"


def describe_event(record: EventRecord, table: DefinitionTable) -> str:
    definition = table.event(record.opcode)
    return " ".join([definition.name] + list(record.params))


def describe_action(record: ActionRecord, table: DefinitionTable) -> str:
    definition = table.action(record.opcode)
    parts = [definition.name]
    for slot, arity in enumerate(definition.param_arity):
        if arity <= 0:
            continue
        value = record.params[slot] if slot < len(record.params) else ""
        if slot == WAYPOINT_SLOT:
            waypoint = decode_waypoint(value)
            parts.append(f"@{waypoint if waypoint is not None else value}")
        else:
            parts.append(value)
    return " ".join(parts)


def describe_trigger(node: TriggerNode, table: DefinitionTable) -> str:
    difficulty = ", ".join(
        name for name, enabled in (("Easy", node.easy), ("Normal", node.normal), ("Hard", node.hard)) if enabled
    )
    lines: List[str] = [
        f"Name: {node.label}",
        f"ID: {node.id}",
        f"House: {node.house}",
        f"Repeat: {node.repeat} ({repeat_label(node.repeat)})",
        f"Tags: {', '.join(node.tags)}",
    ]
    if node.has_link:
        lines.append(f"Link Trigger: {node.link}")
    lines.append(f"Difficulty: {difficulty or '-'}")
    lines.append(f"Disabled: {node.disabled}")
    lines.append("Events:")
    lines.extend(f"  Event {i}: {describe_event(event, table)}" for i, event in enumerate(node.events))
    lines.append("Actions:")
    lines.extend(f"  Action {i}: {describe_action(action, table)}" for i, action in enumerate(node.actions))
    return "\n".join(lines)


def describe_variable(node: VariableNode) -> str:
    return "\n".join(
        [
            "Variable",
            f"Name: {node.label}",
            f"ID: {node.id}",
            f"Initial Value: {node.init_value if node.init_value is not None else 'N/A'}",
        ]
    )
