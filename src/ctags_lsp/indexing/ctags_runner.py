"""
Streaming ingestion of ``ctags --output-format=json`` output.

universal-ctags emits one self-describing JSON object per line. Each line is
decoded on its own: a malformed line is logged and skipped, it never aborts
the scan. Pseudo-tag lines (``"_type": "ptag"``) are ignored.

Usage:
    >>> runner = CtagsRunner("/path/to/workspace")
    >>> entries = runner.load_workspace()        # ctags -R
    >>> entries = runner.scan_file("lib/a.rb")   # one file
"""

import json
import logging
import subprocess
import threading
from typing import IO, Iterable, List, Optional, Tuple

from ctags_lsp.core.exceptions import RecordDecodeError, ToolExecutionError
from ctags_lsp.core.interfaces import ITagSource
from ctags_lsp.core.models import TagEntry
from ctags_lsp.core.text import to_relative_path

logger = logging.getLogger(__name__)

CTAGS_JSON_ARGS = ["--output-format=json", "--fields=+n"]


def parse_json_line(line: str, root: str) -> Optional[TagEntry]:
    """
    Decode one line of ctags JSON output.

    Args:
        line: Raw output line
        root: Absolute workspace root paths are made relative to

    Returns:
        The record with a workspace-relative path, or None for pseudo-tags
        and records outside the workspace

    Raises:
        RecordDecodeError: If the line is not a valid tag object
    """
    try:
        data = json.loads(line)
    except ValueError as e:
        raise RecordDecodeError(line, str(e)) from e
    if not isinstance(data, dict):
        raise RecordDecodeError(line, "expected a JSON object")
    if data.get("_type", "tag") != "tag":
        return None

    try:
        raw = dict(data)
        path = raw.get("path") or ""
        if path:
            try:
                raw["path"] = to_relative_path(root, path)
            except ValueError:
                logger.warning(f"Dropping tag {raw.get('name')!r}: {path} is outside {root}")
                return None
        return TagEntry.from_ctags_json(raw)
    except (TypeError, ValueError) as e:
        raise RecordDecodeError(line, str(e)) from e


def parse_json_lines(lines: Iterable[str], root: str) -> Tuple[List[TagEntry], int, int]:
    """
    Decode a stream of ctags JSON lines, isolating per-line failures.

    Returns:
        Tuple of (entries, decoded_lines, failed_lines) where blank lines
        are not counted
    """
    entries: List[TagEntry] = []
    decoded = 0
    failed = 0
    for line in lines:
        line = line.strip()
        if not line:
            continue
        try:
            entry = parse_json_line(line, root)
        except RecordDecodeError as e:
            failed += 1
            logger.warning(str(e))
            continue
        decoded += 1
        if entry is not None:
            entries.append(entry)
    return entries, decoded, failed


class CtagsRunner(ITagSource):
    """
    Runs universal-ctags as a subprocess and streams its JSON output.

    Attributes:
        root: Absolute workspace root, used as the subprocess working directory
        ctags_bin: ctags executable name or path
    """

    def __init__(self, root: str, ctags_bin: str = "ctags"):
        self.root = root
        self.ctags_bin = ctags_bin

    def describe(self) -> str:
        return f"{self.ctags_bin} -R in {self.root}"

    def load_workspace(self) -> List[TagEntry]:
        """Index the whole workspace recursively."""
        return self.run([*CTAGS_JSON_ARGS, "-R"])

    def scan_file(self, relative_path: str) -> List[TagEntry]:
        """
        Index a single file.

        Args:
            relative_path: Workspace-relative path of the file

        Returns:
            Records found in that file
        """
        return self.run([*CTAGS_JSON_ARGS, relative_path])

    def run(self, args: List[str]) -> List[TagEntry]:
        """
        Run ctags with ``args`` and decode its output line by line.

        Raises:
            ToolExecutionError: If ctags cannot start, exits nonzero, or
                none of its output lines could be decoded
        """
        command = [self.ctags_bin, *args]
        logger.debug(f"Running {' '.join(command)} in {self.root}")
        try:
            process = subprocess.Popen(
                command,
                cwd=self.root,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise ToolExecutionError(command, f"failed to start: {e}") from e

        stderr_chunks: List[str] = []
        with process:
            drain = threading.Thread(
                target=_drain, args=(process.stderr, stderr_chunks), daemon=True
            )
            drain.start()

            entries, decoded, failed = parse_json_lines(process.stdout, self.root)
            returncode = process.wait()
            drain.join()
        stderr = "".join(stderr_chunks)

        if returncode != 0:
            raise ToolExecutionError(
                command, f"exited with status {returncode}", returncode, stderr
            )
        if failed and not decoded:
            raise ToolExecutionError(
                command, f"output is not ctags JSON ({failed} unparsable lines)",
                returncode, stderr,
            )
        logger.info(f"ctags produced {len(entries)} tags ({failed} bad lines skipped)")
        return entries


def _drain(stream: IO[str], sink: List[str]) -> None:
    """Read a pipe to EOF so the child never blocks on a full buffer."""
    for chunk in stream:
        sink.append(chunk)
