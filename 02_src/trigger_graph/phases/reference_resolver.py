"""Cross-reference resolver for auxiliary entities such as teams."""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..pipeline import PipelinePhase
from ..sections import MergedEntity, SectionStore

log = logging.getLogger(__name__)

# Alias keys per link slot, checked in order; the first present key wins.
TEAM_LINK_ALIASES: Tuple[Tuple[str, ...], Tuple[str, ...]] = (
    ("Script", "ScriptTypeId", "ScriptId"),
    ("TaskForce", "TaskForceId", "Taskforce"),
)

_REF_DELIMITERS_RE = re.compile(r"[\s,;()]+")


@dataclass
class EntityBundle:
    primary: MergedEntity
    secondary1: Optional[MergedEntity] = None
    secondary2: Optional[MergedEntity] = None

    def to_json(self) -> Dict[str, Any]:
        return {
            "primary": _entity_to_json(self.primary),
            "secondary1": _entity_to_json(self.secondary1),
            "secondary2": _entity_to_json(self.secondary2),
        }


def _entity_to_json(entity: Optional[MergedEntity]) -> Optional[Dict[str, Any]]:
    if entity is None:
        return None
    return {
        "id": entity.id,
        "occurrences": entity.occurrences,
        "entries": [[key, value] for key, value, _ in entity.entries],
        "values": dict(entity.values),
    }


def extract_reference(value: str) -> str:
    """First delimited token of a field value; trailing annotations are ignored."""
    tokens = [token for token in _REF_DELIMITERS_RE.split(value.strip()) if token]
    return tokens[0] if tokens else ""


def find_reference(values: Dict[str, str], aliases: Sequence[str]) -> str:
    for alias in aliases:
        if alias in values:
            return extract_reference(values[alias])
    return ""


def resolve_bundle(
    source: Union[str, SectionStore],
    entity_id: str,
    link_aliases: Sequence[Sequence[str]] = TEAM_LINK_ALIASES,
) -> EntityBundle:
    store = source if isinstance(source, SectionStore) else SectionStore(source)
    primary = store.find_entity(entity_id)
    linked: List[Optional[MergedEntity]] = []
    for aliases in link_aliases[:2]:
        ref = find_reference(primary.values, aliases)
        if not ref:
            linked.append(None)
            continue
        entity = store.find_entity(ref)
        if not entity.found:
            log.debug("%s references %s, which has no section", entity_id, ref)
        linked.append(entity if entity.found else None)
    linked += [None] * (2 - len(linked))
    return EntityBundle(primary=primary, secondary1=linked[0], secondary2=linked[1])


class ReferenceResolverPhase(PipelinePhase):
    phase_name = "reference_resolver"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        store: SectionStore = context["sections"]
        inspect_ids = [str(entity_id) for entity_id in context.get("inspect_ids", []) or []]

        bundles: Dict[str, EntityBundle] = {}
        unresolved: List[str] = []
        for entity_id in inspect_ids:
            bundle = resolve_bundle(store, entity_id)
            bundles[entity_id] = bundle
            if not bundle.primary.found:
                unresolved.append(entity_id)

        resolver_output = {
            "bundles": {entity_id: bundle.to_json() for entity_id, bundle in bundles.items()},
            "summary": {
                "input_count": len(inspect_ids),
                "resolved_count": len(inspect_ids) - len(unresolved),
                "unresolved_ids": unresolved,
            },
        }
        return {"resolver_bundles": bundles, "resolver_output": resolver_output}
