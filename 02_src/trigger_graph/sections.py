"""Tolerant section/key-value store for map text."""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

log = logging.getLogger(__name__)

_SECTION_RE = re.compile(r"^\s*\[\s*([^\]]*?)\s*\]\s*$")
_PARAM_RE = re.compile(r"^\s*([^=]+?)\s*=\s*(.*?)\s*$")
_COMMENT_RE = re.compile(r"^\s*;")

_LINE_BLANK = "blank"
_LINE_COMMENT = "comment"
_LINE_HEADER = "header"
_LINE_PARAM = "param"
_LINE_MALFORMED = "malformed"


@dataclass
class RawSection:
    name: str
    header_line: int
    entries: List[Tuple[str, str, int]] = field(default_factory=list)
    header_text: str = ""

    def as_dict(self) -> Dict[str, str]:
        return {key: value for key, value, _ in self.entries}

    @property
    def exact_header(self) -> bool:
        return self.header_text.rstrip() == f"[{self.name}]"


@dataclass
class MergedEntity:
    """Every occurrence of one section name, merged in document order."""

    id: str
    occurrences: int = 0
    entries: List[Tuple[str, str, int]] = field(default_factory=list)
    values: Dict[str, str] = field(default_factory=dict)

    @property
    def found(self) -> bool:
        return self.occurrences > 0


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _classify_lines(text: str) -> Iterator[Tuple[int, str, str, Tuple[str, ...]]]:
    for line_no, line in enumerate(normalize_newlines(text).split("\n"), start=1):
        if not line.strip():
            yield line_no, _LINE_BLANK, line, ()
            continue
        if _COMMENT_RE.match(line):
            yield line_no, _LINE_COMMENT, line, ()
            continue
        header = _SECTION_RE.match(line)
        if header:
            yield line_no, _LINE_HEADER, line, (header.group(1),)
            continue
        param = _PARAM_RE.match(line)
        if param:
            yield line_no, _LINE_PARAM, line, (param.group(1), param.group(2))
            continue
        yield line_no, _LINE_MALFORMED, line, ()


def split_sections(text: str) -> List[RawSection]:
    """Split text into sections in document order.

    A body runs until the next header or the end of input; blank lines do not
    end it. Duplicate headers produce separate RawSection entries.
    """
    sections: List[RawSection] = []
    current: Optional[RawSection] = None
    for line_no, kind, line, payload in _classify_lines(text):
        if kind == _LINE_HEADER:
            current = RawSection(name=payload[0], header_line=line_no, header_text=line)
            sections.append(current)
        elif kind == _LINE_PARAM and current is not None:
            current.entries.append((payload[0], payload[1], line_no))
    return sections


class SectionStore:
    """Single-pass section mapping plus multi-occurrence entity lookup."""

    def __init__(self, text: str) -> None:
        if not isinstance(text, str):
            raise TypeError(f"Map text must be str, got {type(text).__name__}.")
        self.text = normalize_newlines(text)
        self.sections: Dict[str, Dict[str, str]] = {}
        self.top_level: Dict[str, str] = {}
        self.duplicate_keys: Dict[str, List[str]] = {}
        self._parse_single_pass()

    def _parse_single_pass(self) -> None:
        section: Optional[str] = None
        seen_keys: Dict[str, set] = {}
        for _, kind, _, payload in _classify_lines(self.text):
            if kind == _LINE_HEADER:
                section = payload[0]
                # A repeated header merges into the existing mapping.
                self.sections.setdefault(section, {})
                seen_keys.setdefault(section, set())
            elif kind == _LINE_PARAM:
                key, value = payload
                if section is None:
                    self.top_level[key] = value
                    continue
                if key in seen_keys[section]:
                    self.duplicate_keys.setdefault(section, [])
                    if key not in self.duplicate_keys[section]:
                        self.duplicate_keys[section].append(key)
                seen_keys[section].add(key)
                self.sections[section][key] = value
            elif kind == _LINE_BLANK:
                section = None

    def has_section(self, name: str) -> bool:
        return name in self.sections

    def section(self, name: str) -> Dict[str, str]:
        return self.sections.get(name, {})

    def fields(self, section: str, key: str) -> List[str]:
        """Comma-split field list for one key, or an empty list."""
        value = self.sections.get(section, {}).get(key)
        if value is None or value == "":
            return []
        return [token.strip() for token in value.split(",")]

    def find_entity(self, entity_id: str) -> MergedEntity:
        return merge_occurrences(entity_id, self.occurrences(entity_id))

    def occurrences(self, entity_id: str) -> List[RawSection]:
        target = entity_id.strip()
        matches = [section for section in split_sections(self.text) if section.name == target]
        exact = [section for section in matches if section.exact_header]
        tolerant = [section for section in matches if not section.exact_header]
        if exact:
            return exact
        if tolerant:
            log.debug("Entity %s matched only by whitespace-tolerant headers", target)
        return tolerant


def merge_occurrences(entity_id: str, occurrences: List[RawSection]) -> MergedEntity:
    merged = MergedEntity(id=entity_id)
    for occurrence in occurrences:
        merged = merge_entities(
            merged,
            MergedEntity(
                id=entity_id,
                occurrences=1,
                entries=list(occurrence.entries),
                values=occurrence.as_dict(),
            ),
        )
    return merged


def merge_entities(first: MergedEntity, second: MergedEntity) -> MergedEntity:
    values = dict(first.values)
    values.update(second.values)
    return MergedEntity(
        id=first.id,
        occurrences=first.occurrences + second.occurrences,
        entries=first.entries + second.entries,
        values=values,
    )
