"""
Core data models for ctags-lsp.

This module defines the canonical symbol record produced by both ingestion
formats, plus the small position types the query handlers work with.

All records are:
- Immutable (frozen dataclasses)
- Serializable (JSON-compatible via to_dict/from_dict)
- Workspace-relative (paths never absolute, always POSIX separators)
"""

import re
from dataclasses import dataclass, asdict
from typing import Dict, Optional, Any


_DIGITS_RE = re.compile(r"\d+")


def extract_line_from_pattern(pattern: str) -> int:
    """
    Extract a line number from a ctags address or search pattern.

    Uses the first run of digits found anywhere in the pattern. This is a
    heuristic: a pattern like ``/^def foo2():$/`` yields 2.

    Args:
        pattern: Raw address field (e.g. "42" or "/^int main() {$/")

    Returns:
        Line number, or 0 if the pattern contains no digits
    """
    if not pattern:
        return 0
    match = _DIGITS_RE.search(pattern)
    if match:
        return int(match.group(0))
    return 0


@dataclass(frozen=True)
class TagEntry:
    """
    Represents a single symbol record from ctags output.

    This is the canonical shape produced by both the streaming JSON reader
    and the legacy tagfile parser. Several records may share a name.

    Attributes:
        name: Identifier of the symbol (e.g., "login_user", "UserClass")
        path: Workspace-root-relative path of the file declaring it
        pattern: Search pattern or snippet ctags recorded for the symbol
        kind: Free-text kind classification ("function", "class", ...)
        line: 1-based declaration line, None when ctags did not report one
        scope: Name of the enclosing scope, if any
        scope_kind: Kind of the enclosing scope, if any
        typeref: Type reference recorded by ctags, if any
        language: Language name reported by ctags, if any
    """
    name: str
    path: str
    pattern: str = ""
    kind: str = ""
    line: Optional[int] = None
    scope: Optional[str] = None
    scope_kind: Optional[str] = None
    typeref: Optional[str] = None
    language: Optional[str] = None

    def __post_init__(self):
        """
        Validate record data after initialization.

        Raises:
            ValueError: If any validation constraint is violated
        """
        for field_name in ('name', 'path', 'pattern', 'kind'):
            value = getattr(self, field_name)
            if not isinstance(value, str):
                raise ValueError(f"TagEntry {field_name} must be a string, got {type(value).__name__}")
        for field_name in ('scope', 'scope_kind', 'typeref', 'language'):
            value = getattr(self, field_name)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"TagEntry {field_name} must be a string, got {type(value).__name__}")
        # bool is an int subclass
        if self.line is not None and (isinstance(self.line, bool) or not isinstance(self.line, int)):
            raise ValueError(f"line must be an integer, got {self.line!r}")
        if not self.name:
            raise ValueError("TagEntry name cannot be empty")
        if not self.path:
            raise ValueError("TagEntry path cannot be empty")
        if self.path.startswith("/"):
            raise ValueError(f"TagEntry path must be workspace-relative, got {self.path}")
        if self.line is not None and self.line < 0:
            raise ValueError(f"line must be >= 0, got {self.line}")

    @property
    def declaration_line(self) -> int:
        """
        Returns the best-known 1-based declaration line.

        Falls back to the first digit run of the pattern when ctags did
        not report an explicit line.

        Returns:
            Line number, or 0 when unknown
        """
        if self.line:
            return self.line
        return extract_line_from_pattern(self.pattern)

    @property
    def extension(self) -> str:
        """File extension of the declaring file, including the dot."""
        base = self.path.rsplit("/", 1)[-1]
        if "." not in base.lstrip("."):
            return ""
        return "." + base.rsplit(".", 1)[-1]

    def with_path(self, path: str) -> 'TagEntry':
        """Return a copy of this record pointing at another relative path."""
        data = asdict(self)
        data['path'] = path
        return TagEntry(**data)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert TagEntry to dictionary for serialization.

        Returns:
            Dictionary representation with all fields
        """
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TagEntry':
        """
        Create TagEntry from dictionary.

        Args:
            data: Dictionary containing record data

        Returns:
            TagEntry instance

        Raises:
            ValueError: If required fields are missing or invalid
        """
        return cls(**data)

    @classmethod
    def from_ctags_json(cls, data: Dict[str, Any]) -> 'TagEntry':
        """
        Create TagEntry from one decoded ``ctags --output-format=json`` object.

        The path is taken verbatim; callers normalize it to be
        workspace-relative before the record reaches the index.

        Args:
            data: Decoded JSON object with ctags field names

        Returns:
            TagEntry instance

        Raises:
            ValueError: If the name or path is missing, or a field has the
                wrong type
        """
        line = data.get('line')
        return cls(
            name=data.get('name') or "",
            path=data.get('path') or "",
            pattern=data.get('pattern') or "",
            kind=data.get('kind') or "",
            line=line if line else None,
            scope=data.get('scope') or None,
            scope_kind=data.get('scopeKind') or None,
            typeref=data.get('typeref') or None,
            language=data.get('language') or None,
        )


@dataclass(frozen=True)
class TextRange:
    """
    Zero-based, end-exclusive span within a single document.

    Attributes:
        start_line: 0-based line of the first character
        start_character: 0-based character offset on start_line
        end_line: 0-based line of the end position
        end_character: 0-based character offset on end_line
    """
    start_line: int
    start_character: int
    end_line: int
    end_character: int

    @classmethod
    def empty_at(cls, line: int) -> 'TextRange':
        """Zero-width range at the start of ``line``."""
        return cls(line, 0, line, 0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the LSP ``Range`` wire shape."""
        return {
            'start': {'line': self.start_line, 'character': self.start_character},
            'end': {'line': self.end_line, 'character': self.end_character},
        }
