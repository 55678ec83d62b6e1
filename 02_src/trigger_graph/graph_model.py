"""Graph data model primitives for parsed map triggers."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Union

NO_LINK = "<none>"

EDGE_ENABLE = "enable"
EDGE_DISABLE = "disable"
EDGE_DESTROY = "destroy"
EDGE_FORCE = "force"
EDGE_LINK = "link"

WARNING_STRUCTURAL = "structural"
WARNING_RECORD_DECODE = "record_decode"


@dataclass
class EventRecord:
    opcode: Optional[int]
    params: List[str] = field(default_factory=list)


@dataclass
class ActionRecord:
    opcode: Optional[int]
    params: List[str] = field(default_factory=list)


@dataclass
class TagRecord:
    id: str
    repeat: Optional[int]
    name: str
    trigger_ref: str


@dataclass
class GraphEdge:
    kind: str
    source: str
    target: str
    directed: bool = True
    dashed: bool = False


@dataclass
class TriggerNode:
    id: str
    label: str
    house: str
    link: str
    repeat: Optional[int]
    easy: bool = False
    normal: bool = False
    hard: bool = False
    disabled: bool = False
    tags: List[str] = field(default_factory=list)
    events: List[EventRecord] = field(default_factory=list)
    actions: List[ActionRecord] = field(default_factory=list)
    neighbours: Set[str] = field(default_factory=set)

    node_type = "trigger"

    @property
    def has_link(self) -> bool:
        return self.link != NO_LINK


@dataclass
class VariableNode:
    id: str
    label: str
    scope: str
    init_value: Optional[str] = None
    neighbours: Set[str] = field(default_factory=set)

    @property
    def node_type(self) -> str:
        return f"{self.scope}_variable"


GraphNode = Union[TriggerNode, VariableNode]


@dataclass
class MapWarning:
    kind: str
    message: str
    subject: str = ""


@dataclass
class GraphState:
    nodes: Dict[str, GraphNode] = field(default_factory=dict)
    edges: List[GraphEdge] = field(default_factory=list)
    warnings: List[MapWarning] = field(default_factory=list)
    globals_by_id: Dict[str, VariableNode] = field(default_factory=dict)


@dataclass
class MapModel:
    """Fully materialized result of one map parse."""

    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)
    diagnostics: List[MapWarning] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def warnings(self) -> List[str]:
        return [warning.message for warning in self.diagnostics]

    def node(self, node_id: str) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    @property
    def triggers(self) -> List[TriggerNode]:
        return [node for node in self.nodes if isinstance(node, TriggerNode)]
