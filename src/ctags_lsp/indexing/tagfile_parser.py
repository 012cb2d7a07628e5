"""
Parser for legacy ctags tagfiles.

A tagfile is a sorted, tab-separated, line-oriented index. Lines starting
with ``!`` are pseudo-tag headers; everything else is a tag line::

    !_TAG_KIND_DESCRIPTION!Python	f,function	/functions/
    greet	src/app.py	/^def greet(name):$/;"	f	line:3	language:Python

Kind-description headers register single-letter kind abbreviations, per
language or as a default. Tag lines carry name, path, an address (line number
or search pattern), optionally a bare kind letter, then ``key:value``
extension fields. Records come out in the same canonical shape as the
streaming JSON reader.

The tagfile is only ever read. It is never rewritten.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from ctags_lsp.core.interfaces import ITagSource
from ctags_lsp.core.models import TagEntry, extract_line_from_pattern
from ctags_lsp.core.text import to_relative_path

logger = logging.getLogger(__name__)

HEADER_PREFIX = "!"
KIND_DESCRIPTION_HEADER = "!_TAG_KIND_DESCRIPTION"
DEFAULT_LANGUAGE = "default"
PATTERN_TERMINATOR = ';"'


@dataclass
class TagfileKindMap:
    """
    Kind-letter resolution table built from tagfile headers.

    Attributes:
        by_language: language -> letter -> kind name ("default" for headers
            without a language)
        first_seen: letter -> the first kind name registered for it under any
            language
        kind_names: every kind name registered so far
    """
    by_language: Dict[str, Dict[str, str]] = field(default_factory=dict)
    first_seen: Dict[str, str] = field(default_factory=dict)
    kind_names: Set[str] = field(default_factory=set)

    def add(self, language: str, letter: str, kind: str) -> None:
        """Register ``letter -> kind`` for ``language`` (or the default table)."""
        language = language or DEFAULT_LANGUAGE
        self.by_language.setdefault(language, {})[letter] = kind
        self.first_seen.setdefault(letter, kind)
        self.kind_names.add(kind)

    def resolve(self, language: Optional[str], letter: str) -> Optional[str]:
        """
        Resolve a kind letter.

        Lookup order: the record's language, the default table, then the
        first mapping seen for the letter under any language.

        Returns:
            The kind name, or None if the letter was never registered
        """
        if language:
            kind = self.by_language.get(language, {}).get(letter)
            if kind:
                return kind
        kind = self.by_language.get(DEFAULT_LANGUAGE, {}).get(letter)
        if kind:
            return kind
        return self.first_seen.get(letter)

    def is_kind_name(self, kind: str) -> bool:
        return kind in self.kind_names


def parse_kind_description(line: str, kind_map: TagfileKindMap) -> bool:
    """
    Register the mapping declared by a ``!_TAG_KIND_DESCRIPTION`` header.

    Args:
        line: Header line (leading/trailing whitespace already stripped)
        kind_map: Table to extend

    Returns:
        True if a mapping was registered
    """
    if not line.startswith(KIND_DESCRIPTION_HEADER):
        return False

    fields = line.split("\t")
    if len(fields) < 2:
        return False

    language = fields[0][len(KIND_DESCRIPTION_HEADER):]
    language = language[1:] if language.startswith("!") else ""

    letter, sep, kind = fields[1].partition(",")
    if not sep or not letter or not kind:
        return False

    kind_map.add(language, letter, kind)
    return True


def resolve_kind(kind_field: str, language: Optional[str], kind_map: TagfileKindMap) -> str:
    """Expand a single-letter kind; longer values are already kind names."""
    if len(kind_field) != 1:
        return kind_field
    return kind_map.resolve(language, kind_field) or kind_field


def parse_tag_line(
    line: str,
    tagfile_path: str,
    root: str,
    kind_map: TagfileKindMap,
) -> Optional[TagEntry]:
    """
    Parse one tag line into a TagEntry.

    Args:
        line: Raw tag line (without the trailing newline)
        tagfile_path: Absolute path of the tagfile; relative tag paths are
            resolved against its directory
        root: Absolute workspace root
        kind_map: Kind table built from the headers seen so far

    Returns:
        The record, or None for malformed lines and paths outside the root
    """
    fields = line.split("\t")
    if len(fields) < 3 or not fields[0] or not fields[1]:
        return None

    name, path, address = fields[0], fields[1], fields[2]
    pattern = address[:-len(PATTERN_TERMINATOR)] if address.endswith(PATTERN_TERMINATOR) else address

    kind_field = ""
    rest = fields[3:]
    if rest and ":" not in rest[0]:
        kind_field = rest[0]
        rest = rest[1:]

    values: Dict[str, Optional[str]] = {
        'language': None,
        'typeref': None,
        'scope': None,
        'scope_kind': None,
    }
    line_number: Optional[int] = None

    for extension in rest:
        if not extension:
            continue
        key, sep, value = extension.partition(":")
        if not sep:
            continue

        if key == "line":
            if value.isdecimal():
                line_number = int(value)
        elif key == "language":
            values['language'] = value
        elif key == "kind":
            kind_field = value
        elif key == "typeref":
            values['typeref'] = value
        elif key == "scope":
            values['scope'] = value
        elif key == "scopeKind":
            values['scope_kind'] = value
        elif not values['scope'] and not values['scope_kind'] and kind_map.is_kind_name(key):
            # e.g. "class:Greeter" on a method line
            values['scope_kind'] = key
            values['scope'] = value

    if not line_number:
        line_number = extract_line_from_pattern(pattern) or None

    kind = resolve_kind(kind_field, values['language'], kind_map) if kind_field else ""

    try:
        relative = to_relative_path(root, path, base=os.path.dirname(tagfile_path))
    except ValueError as e:
        logger.warning(f"Dropping tag {name!r}: {e}")
        return None

    return TagEntry(
        name=name,
        path=relative,
        pattern=pattern,
        kind=kind,
        line=line_number,
        **values,
    )


def parse_tagfile(tagfile_path: str, root: str) -> List[TagEntry]:
    """
    Read a tagfile and return its records in file order.

    Header lines are processed as they are met; universal-ctags writes all
    of them before the first tag line.

    Args:
        tagfile_path: Path of the tagfile
        root: Absolute workspace root

    Returns:
        Parsed records with workspace-relative paths

    Raises:
        OSError: If the tagfile cannot be read
    """
    tagfile_path = os.path.abspath(tagfile_path)
    kind_map = TagfileKindMap()
    entries: List[TagEntry] = []
    skipped = 0

    with open(tagfile_path, "r", encoding="utf-8", errors="replace") as f:
        for raw in f:
            line = raw.rstrip("\r\n")
            stripped = line.strip()
            if not stripped:
                continue
            if stripped.startswith(HEADER_PREFIX):
                parse_kind_description(stripped, kind_map)
                continue

            try:
                entry = parse_tag_line(line, tagfile_path, root, kind_map)
            except ValueError as e:
                logger.warning(f"Skipping malformed tag line {line[:80]!r}: {e}")
                entry = None
            if entry is None:
                skipped += 1
                continue
            entries.append(entry)

    logger.info(f"Read {len(entries)} tags from {tagfile_path} ({skipped} skipped)")
    return entries


class TagfileSource(ITagSource):
    """ITagSource over a legacy tagfile."""

    def __init__(self, tagfile_path: str, root: str):
        self.tagfile_path = tagfile_path
        self.root = root

    def describe(self) -> str:
        return f"tagfile {self.tagfile_path}"

    def load_workspace(self) -> List[TagEntry]:
        return parse_tagfile(self.tagfile_path, self.root)
