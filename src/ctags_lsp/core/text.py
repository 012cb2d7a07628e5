"""
Text and path helpers shared by the document cache and the query handlers.

- split_lines: LSP-compatible line splitting
- get_current_word: identifier run touching a cursor
- find_symbol_range: best-effort span of a symbol on its declaration line
- uri_to_path / path_to_uri / to_relative_path: path conversions

Offsets are logical characters (Python ``str`` indices), so non-ASCII text
is handled without touching raw storage units.
"""

import os
import re
from pathlib import Path, PurePosixPath
from typing import List, Optional
from urllib.parse import unquote, urlparse

from ctags_lsp.core.exceptions import NoWordAtPosition, PositionOutOfRangeError
from ctags_lsp.core.models import TextRange

# Characters accepted in identifiers besides letters, digits and underscore.
IDENTIFIER_EXTRA_CHARS = "$"

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> List[str]:
    """
    Split document text on LSP line boundaries (``\\r\\n``, ``\\r``, ``\\n``).

    Unlike str.splitlines(), a trailing newline yields a final empty line,
    so line numbers stay aligned with the editor's.
    """
    return _LINE_BREAK_RE.split(text)


def is_identifier_char(ch: str) -> bool:
    """Check whether ``ch`` can be part of an identifier."""
    return ch.isalnum() or ch == "_" or ch in IDENTIFIER_EXTRA_CHARS


def get_current_word(line: str, offset: int) -> str:
    """
    Return the identifier at ``offset`` in ``line``.

    The character at the cursor must be an identifier character, unless the
    cursor sits at the end of the line. From there the run is extended left
    and right over identifier characters.

    Args:
        line: Line text
        offset: 0-based character offset of the cursor

    Returns:
        The identifier under the cursor

    Raises:
        PositionOutOfRangeError: If offset is outside [0, len(line)]
        NoWordAtPosition: If no identifier touches the cursor

    Example:
        >>> get_current_word("foo.bar_baz", 4)
        'bar_baz'
        >>> get_current_word("foo.bar_baz", 0)
        'foo'
    """
    if offset < 0 or offset > len(line):
        raise PositionOutOfRangeError(
            f"character {offset} outside line of length {len(line)}"
        )
    if offset < len(line) and not is_identifier_char(line[offset]):
        raise NoWordAtPosition(f"no identifier at character {offset}")

    start = offset
    while start > 0 and is_identifier_char(line[start - 1]):
        start -= 1

    end = offset
    while end < len(line) and is_identifier_char(line[end]):
        end += 1

    if start == end:
        raise NoWordAtPosition(f"no identifier at character {offset}")
    return line[start:end]


def get_line(lines: List[str], line: int) -> str:
    """
    Fetch a 0-based line from a document.

    Raises:
        PositionOutOfRangeError: If the line does not exist
    """
    if line < 0 or line >= len(lines):
        raise PositionOutOfRangeError(
            f"line {line} outside document of {len(lines)} lines"
        )
    return lines[line]


def find_symbol_range(lines: List[str], line_number: int, name: str) -> TextRange:
    """
    Locate a symbol on its declaration line.

    This is a heuristic: declaration lines from ctags can be stale relative
    to unsaved edits held in the document cache.

    Args:
        lines: Document lines
        line_number: 1-based declaration line
        name: Symbol name to look for

    Returns:
        Span of the first occurrence of ``name`` on the line, the whole line
        when the name does not occur, or a zero-width range when the line
        is out of bounds
    """
    index = line_number - 1
    if index < 0 or index >= len(lines):
        return TextRange.empty_at(max(index, 0))

    text = lines[index]
    column = text.find(name) if name else -1
    if column < 0:
        return TextRange(index, 0, index, len(text))
    return TextRange(index, column, index, column + len(name))


def uri_to_path(uri: str) -> str:
    """
    Convert a ``file://`` URI to a filesystem path.

    Anything that is not a file URI is returned unchanged.
    """
    if not uri.startswith("file://"):
        return uri
    parsed = urlparse(uri)
    path = unquote(parsed.path)
    # file:///C:/x -> C:/x on Windows
    if os.name == "nt" and re.match(r"^/[A-Za-z]:", path):
        path = path[1:]
    if parsed.netloc and parsed.netloc != "localhost":
        path = f"//{parsed.netloc}{path}"
    return os.path.normpath(path)


def path_to_uri(path: str) -> str:
    """Convert a filesystem path to a percent-encoded ``file://`` URI."""
    return Path(os.path.abspath(path)).as_uri()


def to_relative_path(root: str, path: str, base: Optional[str] = None) -> str:
    """
    Express ``path`` relative to the workspace ``root``.

    Args:
        root: Absolute workspace root
        path: Absolute path, or a path relative to ``base``
        base: Directory relative paths are resolved against (default: root)

    Returns:
        Root-relative path with POSIX separators

    Raises:
        ValueError: If the path lies outside the workspace root
    """
    if not os.path.isabs(path):
        path = os.path.join(base or root, path)
    relative = os.path.relpath(os.path.normpath(path), os.path.normpath(root))
    relative = PurePosixPath(*Path(relative).parts).as_posix()
    if relative == ".." or relative.startswith("../") or os.path.isabs(relative):
        raise ValueError(f"{path} is outside workspace root {root}")
    return relative
