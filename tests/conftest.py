import json
import os
import stat

import pytest

from ctags_lsp.config import ServerConfig
from ctags_lsp.indexing.symbol_index import SymbolIndex
from ctags_lsp.lsp.handlers import handle_initialize
from ctags_lsp.lsp.state import ServerState

APP_PY = '''import os


class Greeter:
    def greet(self, name):
        return "hello " + name


def greet_all(names):
    return [Greeter().greet(n) for n in names]
'''

GREETER_RB = '''class Greeter
  def greet(name)
    "hello #{name}"
  end
end
'''

NOTES_TXT = '''greeting
'''

TAGFILE = "\n".join([
    "!_TAG_FILE_FORMAT\t2\t/extended format/",
    "!_TAG_FILE_SORTED\t1\t/0=unsorted, 1=sorted, 2=foldcase/",
    "!_TAG_KIND_DESCRIPTION!Python\tc,class\t/classes/",
    "!_TAG_KIND_DESCRIPTION!Python\tf,function\t/functions/",
    "!_TAG_KIND_DESCRIPTION!Python\tm,method\t/class methods/",
    "!_TAG_KIND_DESCRIPTION!Ruby\tc,class\t/classes/",
    "!_TAG_KIND_DESCRIPTION!Ruby\tf,method\t/methods/",
    "Greeter\tlib/greeter.rb\t/^class Greeter$/;\"\tc\tline:1\tlanguage:Ruby",
    "Greeter\tsrc/app.py\t/^class Greeter:$/;\"\tc\tline:4\tlanguage:Python",
    "greet\tlib/greeter.rb\t/^  def greet(name)$/;\"\tf\tline:2\tlanguage:Ruby\tclass:Greeter",
    "greet\tsrc/app.py\t/^    def greet(self, name):$/;\"\tm\tline:5\tlanguage:Python\tclass:Greeter",
    "greet_all\tsrc/app.py\t/^def greet_all(names):$/;\"\tf\tline:9\tlanguage:Python",
    "greeting\tdocs/notes.txt\t/^greeting$/;\"\tkind:string\tline:1",
]) + "\n"

# The same records as TAGFILE, as ``ctags --output-format=json`` prints them
CTAGS_JSON_RECORDS = [
    {"_type": "ptag", "name": "JSON_OUTPUT_VERSION", "path": "0.0", "pattern": "in development"},
    {"_type": "tag", "name": "Greeter", "path": "lib/greeter.rb", "pattern": "/^class Greeter$/",
     "language": "Ruby", "line": 1, "kind": "class"},
    {"_type": "tag", "name": "Greeter", "path": "src/app.py", "pattern": "/^class Greeter:$/",
     "language": "Python", "line": 4, "kind": "class"},
    {"_type": "tag", "name": "greet", "path": "lib/greeter.rb", "pattern": "/^  def greet(name)$/",
     "language": "Ruby", "line": 2, "kind": "method", "scope": "Greeter", "scopeKind": "class"},
    {"_type": "tag", "name": "greet", "path": "src/app.py", "pattern": "/^    def greet(self, name):$/",
     "language": "Python", "line": 5, "kind": "method", "scope": "Greeter", "scopeKind": "class"},
    {"_type": "tag", "name": "greet_all", "path": "src/app.py", "pattern": "/^def greet_all(names):$/",
     "language": "Python", "line": 9, "kind": "function"},
    {"_type": "tag", "name": "greeting", "path": "docs/notes.txt", "pattern": "/^greeting$/",
     "line": 1, "kind": "string"},
]

# What ctags reports for src/app.py after it gains a function
RESCAN_JSON_RECORDS = [
    {"_type": "tag", "name": "Greeter", "path": "src/app.py", "pattern": "/^class Greeter:$/",
     "language": "Python", "line": 4, "kind": "class"},
    {"_type": "tag", "name": "farewell", "path": "src/app.py", "pattern": "/^def farewell():$/",
     "language": "Python", "line": 12, "kind": "function"},
]


def to_json_lines(records):
    return "".join(json.dumps(r) + "\n" for r in records)


@pytest.fixture
def workspace(tmp_path):
    """Create a small two-language project without a tagfile."""
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.py").write_text(APP_PY)
    (tmp_path / "lib").mkdir()
    (tmp_path / "lib" / "greeter.rb").write_text(GREETER_RB)
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "notes.txt").write_text(NOTES_TXT)
    return tmp_path


@pytest.fixture
def tagged_workspace(workspace):
    """The sample project with a ``tags`` file in its root."""
    (workspace / "tags").write_text(TAGFILE)
    return workspace


@pytest.fixture
def fake_ctags(tmp_path_factory):
    """
    Build a stand-in ctags executable.

    Returns a factory taking the JSON printed for ``-R`` runs, the JSON
    printed for single-file runs, the exit status and a delay in seconds
    before any output.
    """
    if os.name == "nt":
        pytest.skip("fake ctags is a POSIX shell script")

    def build(recursive_output="", file_output="", status=0, stderr="", delay=0):
        directory = tmp_path_factory.mktemp("fake_ctags")
        (directory / "recursive.json").write_text(recursive_output)
        (directory / "file.json").write_text(file_output)
        script = directory / "ctags"
        script.write_text(
            "#!/bin/sh\n"
            f"sleep {delay}\n"
            "for last; do :; done\n"
            f'if [ "$last" = "-R" ]; then cat "{directory}/recursive.json"; '
            f'else cat "{directory}/file.json"; fi\n'
            f'printf "%s" "{stderr}" >&2\n'
            f"exit {status}\n"
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return build


@pytest.fixture
def config():
    """Configuration isolated from CTAGS_LSP_* variables in the environment."""
    return ServerConfig(tagfile=None, ctags_bin="ctags", tagfile_names=["tags", ".tags"])


@pytest.fixture
def loaded_state(tagged_workspace, config):
    """ServerState initialized over the tagged sample project."""
    state = ServerState(config=config, index=SymbolIndex())
    handle_initialize(state, {"rootUri": tagged_workspace.as_uri()})
    return state


@pytest.fixture
def ctags_json_output():
    """``ctags --output-format=json -R`` output for the sample project."""
    return to_json_lines(CTAGS_JSON_RECORDS)


@pytest.fixture
def rescan_json_output():
    """Single-file ctags output for src/app.py after an edit."""
    return to_json_lines(RESCAN_JSON_RECORDS)
