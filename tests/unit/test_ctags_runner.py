"""Unit tests for streaming ctags JSON ingestion."""
import json
from unittest.mock import patch

import pytest
from ctags_lsp.core.exceptions import RecordDecodeError, ToolExecutionError
from ctags_lsp.indexing.ctags_runner import (
    CTAGS_JSON_ARGS,
    CtagsRunner,
    parse_json_line,
    parse_json_lines,
)


class TestParseJsonLine:

    def test_tag_record(self, tmp_path):
        line = json.dumps({"_type": "tag", "name": "greet", "path": "lib/a.rb",
                           "pattern": "/^  def greet$/", "line": 2, "kind": "method",
                           "scope": "Greeter", "scopeKind": "class"})
        entry = parse_json_line(line, str(tmp_path))

        assert entry.name == "greet"
        assert entry.path == "lib/a.rb"
        assert entry.scope_kind == "class"

    def test_pseudo_tag_ignored(self, tmp_path):
        line = json.dumps({"_type": "ptag", "name": "JSON_OUTPUT_VERSION", "path": "0.0"})
        assert parse_json_line(line, str(tmp_path)) is None

    def test_absolute_path_made_relative(self, tmp_path):
        path = str(tmp_path / "src" / "a.c")
        entry = parse_json_line(json.dumps({"name": "main", "path": path}), str(tmp_path))
        assert entry.path == "src/a.c"

    def test_outside_root_dropped(self, tmp_path):
        line = json.dumps({"name": "main", "path": "../other/a.c"})
        assert parse_json_line(line, str(tmp_path)) is None

    @pytest.mark.parametrize("line", [
        "{not json",
        "[1, 2]",
        json.dumps({"_type": "tag", "path": "a.c"}),
        json.dumps({"_type": "tag", "name": "x", "path": "a.c", "line": "abc"}),
    ])
    def test_bad_lines(self, tmp_path, line):
        with pytest.raises(RecordDecodeError):
            parse_json_line(line, str(tmp_path))

    def test_wrongly_typed_record_counted_as_failed(self, tmp_path):
        lines = [
            json.dumps({"_type": "tag", "name": 123, "path": "a.c", "kind": "function"}),
            json.dumps({"_type": "tag", "name": "alpha", "path": "a.c", "kind": "function"}),
        ]
        entries, decoded, failed = parse_json_lines(lines, str(tmp_path))

        assert [e.name for e in entries] == ["alpha"]
        assert decoded == 1
        assert failed == 1

    def test_bad_line_isolated(self, tmp_path):
        lines = [
            json.dumps({"name": "a", "path": "a.c"}),
            "garbage",
            "",
            json.dumps({"name": "b", "path": "b.c"}),
        ]
        entries, decoded, failed = parse_json_lines(lines, str(tmp_path))

        assert [e.name for e in entries] == ["a", "b"]
        assert decoded == 2
        assert failed == 1


class TestCtagsRunner:

    def test_load_workspace(self, workspace, fake_ctags, ctags_json_output):
        runner = CtagsRunner(str(workspace), ctags_bin=fake_ctags(recursive_output=ctags_json_output))
        entries = runner.load_workspace()

        assert len(entries) == 6
        assert entries[0].path == "lib/greeter.rb"

    def test_scan_file(self, workspace, fake_ctags, rescan_json_output):
        runner = CtagsRunner(str(workspace), ctags_bin=fake_ctags(file_output=rescan_json_output))
        entries = runner.scan_file("src/app.py")

        assert [e.name for e in entries] == ["Greeter", "farewell"]

    def test_command_line(self, workspace):
        runner = CtagsRunner(str(workspace), ctags_bin="my-ctags")
        with patch.object(CtagsRunner, "run", return_value=[]) as run:
            runner.scan_file("src/app.py")
            runner.load_workspace()

        assert run.call_args_list[0].args[0] == [*CTAGS_JSON_ARGS, "src/app.py"]
        assert run.call_args_list[1].args[0] == [*CTAGS_JSON_ARGS, "-R"]

    def test_malformed_line_skipped(self, workspace, fake_ctags, ctags_json_output):
        output = "this is not json\n" + ctags_json_output
        runner = CtagsRunner(str(workspace), ctags_bin=fake_ctags(recursive_output=output))

        assert len(runner.load_workspace()) == 6

    def test_nonzero_exit(self, workspace, fake_ctags):
        runner = CtagsRunner(str(workspace), ctags_bin=fake_ctags(status=2, stderr="bad option"))

        with pytest.raises(ToolExecutionError) as exc_info:
            runner.load_workspace()

        assert exc_info.value.returncode == 2
        assert "bad option" in exc_info.value.stderr

    def test_missing_executable(self, workspace):
        runner = CtagsRunner(str(workspace), ctags_bin=str(workspace / "no-such-ctags"))

        with pytest.raises(ToolExecutionError) as exc_info:
            runner.load_workspace()

        assert exc_info.value.returncode is None

    def test_output_not_json(self, workspace, fake_ctags):
        # Exuberant ctags ignores --output-format and prints a tagfile
        runner = CtagsRunner(str(workspace), ctags_bin=fake_ctags(recursive_output="main\ta.c\t1;\"\tf\n"))

        with pytest.raises(ToolExecutionError, match="not ctags JSON"):
            runner.load_workspace()

    def test_empty_output(self, workspace, fake_ctags):
        runner = CtagsRunner(str(workspace), ctags_bin=fake_ctags())
        assert runner.load_workspace() == []
