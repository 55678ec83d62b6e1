"""Deterministic orchestrator for graph state mutations."""

import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from .graph_model import (
    WARNING_STRUCTURAL,
    GraphEdge,
    GraphNode,
    GraphState,
    MapModel,
    MapWarning,
    TriggerNode,
    VariableNode,
)

log = logging.getLogger(__name__)


class MapGraphOrchestrator:
    """Owns node identity, edges and warnings for one parse invocation."""

    def __init__(self) -> None:
        self.state = GraphState()

    def add_warning(self, kind: str, message: str, subject: str = "") -> None:
        log.debug("map warning (%s): %s", kind, message)
        self.state.warnings.append(MapWarning(kind=kind, message=message, subject=subject))

    def add_node(self, node: GraphNode) -> bool:
        """Register a node; the first occurrence of an ID wins."""
        if node.id in self.state.nodes:
            self.add_warning(WARNING_STRUCTURAL, f"ID {node.id} duplicated!", subject=node.id)
            return False
        self.state.nodes[node.id] = node
        return True

    def ensure_global_variable(self, global_id: str) -> VariableNode:
        existing = self.state.globals_by_id.get(global_id)
        if existing is not None:
            return existing
        node = VariableNode(
            id=f"G{global_id}",
            label=f"Global Variable {global_id}",
            scope="global",
        )
        self.state.globals_by_id[global_id] = node
        self.add_node(node)
        return node

    def add_edge(self, edge: GraphEdge) -> None:
        self.state.edges.append(edge)

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        return self.state.nodes.get(node_id)

    def link_neighbours(self) -> int:
        linked = 0
        for edge in self.state.edges:
            source = self.state.nodes.get(edge.source)
            target = self.state.nodes.get(edge.target)
            if source is None or target is None:
                continue
            source.neighbours.add(edge.target)
            target.neighbours.add(edge.source)
            linked += 1
        return linked

    def to_model(self, meta: Optional[Dict[str, Any]] = None) -> MapModel:
        return MapModel(
            nodes=list(self.state.nodes.values()),
            edges=list(self.state.edges),
            diagnostics=list(self.state.warnings),
            meta=dict(meta or {}),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "nodes": [self._node_to_json(node) for node in self.state.nodes.values()],
            "edges": [asdict(edge) for edge in self.state.edges],
            "warnings": [warning.message for warning in self.state.warnings],
        }

    @staticmethod
    def _node_to_json(node: GraphNode) -> Dict[str, Any]:
        payload = asdict(node)
        payload["type"] = node.node_type
        payload["neighbours"] = sorted(node.neighbours)
        return payload

    def counts(self) -> Dict[str, int]:
        triggers: List[GraphNode] = [
            node for node in self.state.nodes.values() if isinstance(node, TriggerNode)
        ]
        return {
            "node_count": len(self.state.nodes),
            "trigger_count": len(triggers),
            "variable_count": len(self.state.nodes) - len(triggers),
            "edge_count": len(self.state.edges),
            "warning_count": len(self.state.warnings),
        }
