"""Disjoint-set grouping of triggers joined by their link field."""

from typing import Dict, Iterable, List, Optional, Set, Tuple

from .graph_model import NO_LINK


class TriggerGroups:
    """Union-find over trigger IDs, owned by a single parse invocation."""

    def __init__(self) -> None:
        self._parent: Dict[str, str] = {}
        self._tags: Dict[str, List[str]] = {}
        self.cyclic: List[str] = []

    def initialize(self, trigger_links: Iterable[Tuple[str, str]]) -> None:
        for trigger_id, link in trigger_links:
            link = (link or "").strip()
            self._parent[trigger_id] = trigger_id if link in ("", NO_LINK) else link
            self._tags[trigger_id] = []

    def __contains__(self, trigger_id: str) -> bool:
        return trigger_id in self._parent

    def find(self, trigger_id: str) -> str:
        """Resolve the group representative, compressing the visited path.

        Unknown IDs are their own representative. A cyclic chain stops at the
        last node resolved before a repeat visit, which then becomes the root.
        """
        path: List[str] = []
        visited: Set[str] = set()
        current = trigger_id
        while True:
            parent = self._parent.get(current, current)
            if parent == current:
                break
            path.append(current)
            visited.add(current)
            if parent in visited:
                self._parent[current] = current
                self.cyclic.append(current)
                break
            current = parent
        for node in path:
            if node in self._parent:
                self._parent[node] = current
        return current

    def has_slot(self, representative: str) -> bool:
        return representative in self._tags

    def attach_tag(self, tag_id: str, trigger_ref: str) -> Optional[str]:
        """Append a tag to the group of trigger_ref; None when the group is unknown."""
        representative = self.find(trigger_ref.strip())
        if not self.has_slot(representative):
            return None
        self._tags[representative].append(tag_id)
        return representative

    def tags_for(self, trigger_id: str) -> List[str]:
        representative = self.find(trigger_id)
        return list(self._tags.get(representative, []))
