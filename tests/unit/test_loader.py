"""Unit tests for IndexLoader."""
import pytest
from ctags_lsp.config import ServerConfig
from ctags_lsp.core.exceptions import ConfigurationError, ToolExecutionError
from ctags_lsp.indexing.ctags_runner import CtagsRunner
from ctags_lsp.indexing.loader import IndexLoader
from ctags_lsp.indexing.symbol_index import SymbolIndex
from ctags_lsp.indexing.tagfile_parser import TagfileSource


def make_loader(root, **settings):
    config = ServerConfig(**{"tagfile": None, "tagfile_names": ["tags", ".tags"], **settings})
    return IndexLoader(str(root), config, SymbolIndex())


class TestSourceSelection:

    def test_well_known_tagfile(self, tagged_workspace):
        loader = make_loader(tagged_workspace)

        assert loader.find_tagfile() == str(tagged_workspace / "tags")
        assert isinstance(loader.select_source(), TagfileSource)

    def test_dot_tags(self, workspace):
        (workspace / ".tags").write_text("")
        assert make_loader(workspace).find_tagfile() == str(workspace / ".tags")

    def test_no_tagfile_runs_ctags(self, workspace):
        loader = make_loader(workspace)

        assert loader.find_tagfile() is None
        assert isinstance(loader.select_source(), CtagsRunner)

    def test_override_relative_to_root(self, workspace):
        (workspace / "build").mkdir()
        (workspace / "build" / "TAGS.ctags").write_text("")
        loader = make_loader(workspace, tagfile="build/TAGS.ctags")

        assert loader.find_tagfile() == str(workspace / "build" / "TAGS.ctags")

    def test_override_wins_over_well_known(self, tagged_workspace):
        custom = tagged_workspace / "custom.tags"
        custom.write_text("")
        loader = make_loader(tagged_workspace, tagfile=str(custom))

        assert loader.find_tagfile() == str(custom)

    def test_missing_override(self, workspace):
        loader = make_loader(workspace, tagfile="nope")

        with pytest.raises(ConfigurationError, match="not found"):
            loader.find_tagfile()


class TestLoad:

    def test_load_from_tagfile(self, tagged_workspace):
        loader = make_loader(tagged_workspace)

        assert loader.load() == 6
        assert len(loader.index) == 6
        assert loader.stats['total_symbols'] == 6
        assert "tagfile" in loader.stats['source']

    def test_load_from_ctags(self, workspace, fake_ctags, ctags_json_output):
        loader = make_loader(workspace, ctags_bin=fake_ctags(recursive_output=ctags_json_output))

        assert loader.load() == 6

    def test_load_failure_propagates(self, workspace, fake_ctags):
        loader = make_loader(workspace, ctags_bin=fake_ctags(status=1))

        with pytest.raises(ToolExecutionError):
            loader.load()
        assert len(loader.index) == 0


class TestRescan:

    def test_rescan_replaces_file_records(self, tagged_workspace, fake_ctags, rescan_json_output):
        loader = make_loader(tagged_workspace, ctags_bin=fake_ctags(file_output=rescan_json_output))
        loader.load()

        removed, added = loader.rescan_file(str(tagged_workspace / "src" / "app.py"))

        assert (removed, added) == (3, 2)
        assert [e.name for e in loader.index.find_by_path("src/app.py")] == ["Greeter", "farewell"]
        assert len(loader.index.find_by_path("lib/greeter.rb")) == 2

    def test_rescan_ignores_records_for_other_files(self, tagged_workspace, fake_ctags, rescan_json_output):
        output = rescan_json_output + '{"_type": "tag", "name": "stray", "path": "lib/greeter.rb"}\n'
        loader = make_loader(tagged_workspace, ctags_bin=fake_ctags(file_output=output))
        loader.load()
        loader.rescan_file(str(tagged_workspace / "src" / "app.py"))

        assert loader.index.find_by_name("stray") == []

    def test_rescan_outside_root(self, tagged_workspace, tmp_path_factory):
        loader = make_loader(tagged_workspace)
        elsewhere = tmp_path_factory.mktemp("elsewhere") / "a.py"

        with pytest.raises(ValueError):
            loader.rescan_file(str(elsewhere))

    def test_rescan_failure_leaves_index_untouched(self, tagged_workspace, fake_ctags):
        loader = make_loader(tagged_workspace, ctags_bin=fake_ctags(status=1))
        loader.load()

        with pytest.raises(ToolExecutionError):
            loader.rescan_file(str(tagged_workspace / "src" / "app.py"))
        assert len(loader.index.find_by_path("src/app.py")) == 3
