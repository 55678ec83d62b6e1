"""Decoders for the comma-separated event and action streams of a trigger."""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .graph_model import (
    EDGE_DESTROY,
    EDGE_DISABLE,
    EDGE_ENABLE,
    EDGE_FORCE,
    ActionRecord,
    EventRecord,
    GraphEdge,
)

ACTION_PARAM_SLOTS = 7
EVENT_TWO_PARAM_FLAG = 2

LOCAL_PREFIX = "L"
GLOBAL_PREFIX = "G"

_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class EdgePolicy:
    kind: str
    dashed: bool = False
    prefix: str = ""


# Events point from the variable toward the trigger that reads it.
EVENT_EDGE_POLICIES: Dict[int, EdgePolicy] = {
    27: EdgePolicy(EDGE_ENABLE, dashed=True, prefix=GLOBAL_PREFIX),
    28: EdgePolicy(EDGE_DISABLE, dashed=True, prefix=GLOBAL_PREFIX),
    36: EdgePolicy(EDGE_ENABLE, dashed=True, prefix=LOCAL_PREFIX),
    37: EdgePolicy(EDGE_DISABLE, dashed=True, prefix=LOCAL_PREFIX),
}

# Actions point from the owning trigger toward parameter slot 1.
ACTION_EDGE_POLICIES: Dict[int, EdgePolicy] = {
    12: EdgePolicy(EDGE_DESTROY),
    22: EdgePolicy(EDGE_FORCE),
    53: EdgePolicy(EDGE_ENABLE),
    54: EdgePolicy(EDGE_DISABLE),
    56: EdgePolicy(EDGE_ENABLE, dashed=True, prefix=LOCAL_PREFIX),
    57: EdgePolicy(EDGE_DISABLE, dashed=True, prefix=LOCAL_PREFIX),
    28: EdgePolicy(EDGE_ENABLE, dashed=True, prefix=GLOBAL_PREFIX),
    29: EdgePolicy(EDGE_DISABLE, dashed=True, prefix=GLOBAL_PREFIX),
}


@dataclass
class DecodeResult:
    records: List = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)
    global_refs: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def error(self) -> str:
        return "; ".join(self.errors)

    def fail(self, reason: str) -> None:
        self.errors.append(reason)


def parse_int(token: Optional[str]) -> Optional[int]:
    """Leading-integer parse; None stands for a missing or non-numeric field."""
    if token is None:
        return None
    match = _INT_PREFIX_RE.match(token)
    return int(match.group(1)) if match else None


def split_stream(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [token.strip() for token in raw.split(",")]


def _token(tokens: Sequence[str], index: int) -> Optional[str]:
    return tokens[index] if index < len(tokens) else None


def _emit_edge(result: DecodeResult, policy: EdgePolicy, ref: str, owner_id: str, inbound: bool) -> None:
    if not ref:
        return
    if policy.prefix == GLOBAL_PREFIX and ref not in result.global_refs:
        result.global_refs.append(ref)
    other = f"{policy.prefix}{ref}"
    source, target = (other, owner_id) if inbound else (owner_id, other)
    result.edges.append(
        GraphEdge(kind=policy.kind, source=source, target=target, directed=True, dashed=policy.dashed)
    )


def decode_events(raw: Optional[str], owner_id: str) -> DecodeResult:
    """Decode `count,opcode,flag,p0[,p1],...`; flag 2 carries a second parameter."""
    result = DecodeResult()
    tokens = split_stream(raw)
    index = 1
    while index < len(tokens):
        opcode = parse_int(tokens[index])
        flag = parse_int(_token(tokens, index + 1))
        arity = 2 if flag == EVENT_TWO_PARAM_FLAG else 1
        raw_params = [_token(tokens, index + 2 + slot) for slot in range(arity)]
        if opcode is None:
            result.fail(f"event {len(result.records)} has non-numeric opcode {tokens[index]!r}")
        if any(param is None for param in raw_params):
            result.fail(f"event stream truncated at event {len(result.records)}")
        params = [param if param is not None else "" for param in raw_params]
        result.records.append(EventRecord(opcode=opcode, params=params))

        policy = EVENT_EDGE_POLICIES.get(opcode) if opcode is not None else None
        if policy is not None:
            _emit_edge(result, policy, params[0], owner_id, inbound=True)
        index += 2 + arity
    return result


def decode_actions(raw: Optional[str], owner_id: str) -> DecodeResult:
    """Decode `count,(opcode,p0..p6)*`, stopping after the declared count."""
    result = DecodeResult()
    tokens = split_stream(raw)
    if not tokens:
        return result
    count = parse_int(tokens[0])
    if count is None:
        result.fail(f"non-numeric action count {tokens[0]!r}")
        return result
    index = 1
    while index < len(tokens) and len(result.records) < count:
        opcode = parse_int(tokens[index])
        if opcode is None:
            result.fail(f"action {len(result.records)} has non-numeric opcode {tokens[index]!r}")
        params = [_token(tokens, index + slot) or "" for slot in range(1, ACTION_PARAM_SLOTS + 1)]
        result.records.append(ActionRecord(opcode=opcode, params=params))

        policy = ACTION_EDGE_POLICIES.get(opcode) if opcode is not None else None
        if policy is not None:
            _emit_edge(result, policy, params[1], owner_id, inbound=False)
        index += 1 + ACTION_PARAM_SLOTS
    if len(result.records) < count:
        result.fail(f"declared {count} actions but decoded {len(result.records)}")
    return result
