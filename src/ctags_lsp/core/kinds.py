"""
Kind tables mapping ctags kind names to LSP presentation categories.

ctags reports a free-text kind per record ("function", "singletonMethod",
"toplevelVariable", ...). Editors want one of a fixed set of completion item
kinds or symbol kinds. The two tables below cover the kind names emitted by
universal-ctags parsers; the lookup functions make them total:

- completion_kind() falls back to CompletionItemKind.TEXT
- symbol_kind() returns None for kinds with no symbol category, and
  workspace/document symbol queries skip such records

Usage:
    >>> completion_kind("method")
    <CompletionItemKind.METHOD: 2>
    >>> symbol_kind("keyword") is None
    True

Adding New Kinds:
    1. Add the ctags kind name to COMPLETION_KINDS
    2. Add it to SYMBOL_KINDS if it should appear in symbol searches
"""

from enum import IntEnum
from typing import Dict, FrozenSet, Optional


class CompletionItemKind(IntEnum):
    """LSP ``CompletionItemKind`` values."""
    TEXT = 1
    METHOD = 2
    FUNCTION = 3
    CONSTRUCTOR = 4
    FIELD = 5
    VARIABLE = 6
    CLASS = 7
    INTERFACE = 8
    MODULE = 9
    PROPERTY = 10
    UNIT = 11
    VALUE = 12
    ENUM = 13
    KEYWORD = 14
    SNIPPET = 15
    COLOR = 16
    FILE = 17
    REFERENCE = 18
    FOLDER = 19
    ENUM_MEMBER = 20
    CONSTANT = 21
    STRUCT = 22
    EVENT = 23
    OPERATOR = 24
    TYPE_PARAMETER = 25


class SymbolKind(IntEnum):
    """LSP ``SymbolKind`` values."""
    FILE = 1
    MODULE = 2
    NAMESPACE = 3
    PACKAGE = 4
    CLASS = 5
    METHOD = 6
    PROPERTY = 7
    FIELD = 8
    CONSTRUCTOR = 9
    ENUM = 10
    INTERFACE = 11
    FUNCTION = 12
    VARIABLE = 13
    CONSTANT = 14
    STRING = 15
    NUMBER = 16
    BOOLEAN = 17
    ARRAY = 18
    OBJECT = 19
    KEY = 20
    NULL = 21
    ENUM_MEMBER = 22
    STRUCT = 23
    EVENT = 24
    OPERATOR = 25
    TYPE_PARAMETER = 26


# Completion categories offered after a literal '.' (member access).
CALLABLE_COMPLETION_KINDS: FrozenSet[CompletionItemKind] = frozenset({
    CompletionItemKind.FUNCTION,
    CompletionItemKind.METHOD,
})


# ==============================================================================
# ctags kind -> CompletionItemKind
# ==============================================================================

COMPLETION_KINDS: Dict[str, CompletionItemKind] = {
    "alias": CompletionItemKind.VARIABLE,
    "arg": CompletionItemKind.VARIABLE,
    "attribute": CompletionItemKind.PROPERTY,
    "boolean": CompletionItemKind.CONSTANT,
    "callback": CompletionItemKind.FUNCTION,
    "category": CompletionItemKind.ENUM,
    "ccflag": CompletionItemKind.CONSTANT,
    "cell": CompletionItemKind.VARIABLE,
    "class": CompletionItemKind.CLASS,
    "collection": CompletionItemKind.CLASS,
    "command": CompletionItemKind.FUNCTION,
    "component": CompletionItemKind.STRUCT,
    "config": CompletionItemKind.CONSTANT,
    "const": CompletionItemKind.CONSTANT,
    "constant": CompletionItemKind.CONSTANT,
    "constructor": CompletionItemKind.CONSTRUCTOR,
    "context": CompletionItemKind.VARIABLE,
    "counter": CompletionItemKind.VARIABLE,
    "data": CompletionItemKind.VARIABLE,
    "dataset": CompletionItemKind.VARIABLE,
    "def": CompletionItemKind.FUNCTION,
    "define": CompletionItemKind.CONSTANT,
    "delegate": CompletionItemKind.CLASS,
    "enum": CompletionItemKind.ENUM,
    "enumConstant": CompletionItemKind.ENUM_MEMBER,
    "enumerator": CompletionItemKind.ENUM,
    "environment": CompletionItemKind.VARIABLE,
    "error": CompletionItemKind.ENUM,
    "event": CompletionItemKind.EVENT,
    "exception": CompletionItemKind.CLASS,
    "externvar": CompletionItemKind.VARIABLE,
    "face": CompletionItemKind.INTERFACE,
    "feature": CompletionItemKind.PROPERTY,
    "field": CompletionItemKind.FIELD,
    "fn": CompletionItemKind.FUNCTION,
    "fun": CompletionItemKind.FUNCTION,
    "func": CompletionItemKind.FUNCTION,
    "function": CompletionItemKind.FUNCTION,
    "functionVar": CompletionItemKind.VARIABLE,
    "functor": CompletionItemKind.CLASS,
    "generic": CompletionItemKind.TYPE_PARAMETER,
    "getter": CompletionItemKind.METHOD,
    "global": CompletionItemKind.VARIABLE,
    "globalVar": CompletionItemKind.VARIABLE,
    "group": CompletionItemKind.ENUM,
    "guard": CompletionItemKind.VARIABLE,
    "handler": CompletionItemKind.FUNCTION,
    "icon": CompletionItemKind.ENUM,
    "id": CompletionItemKind.VARIABLE,
    "implementation": CompletionItemKind.CLASS,
    "index": CompletionItemKind.VARIABLE,
    "infoitem": CompletionItemKind.VARIABLE,
    "inline": CompletionItemKind.KEYWORD,
    "inputSection": CompletionItemKind.KEYWORD,
    "instance": CompletionItemKind.VARIABLE,
    "interface": CompletionItemKind.INTERFACE,
    "it": CompletionItemKind.VARIABLE,
    "jurisdiction": CompletionItemKind.VARIABLE,
    "key": CompletionItemKind.KEYWORD,
    "keyInMiddle": CompletionItemKind.KEYWORD,
    "keyword": CompletionItemKind.KEYWORD,
    "kind": CompletionItemKind.KEYWORD,
    "l4subsection": CompletionItemKind.KEYWORD,
    "l5subsection": CompletionItemKind.KEYWORD,
    "label": CompletionItemKind.KEYWORD,
    "langdef": CompletionItemKind.KEYWORD,
    "legal": CompletionItemKind.KEYWORD,
    "legislation": CompletionItemKind.KEYWORD,
    "letter": CompletionItemKind.KEYWORD,
    "library": CompletionItemKind.MODULE,
    "list": CompletionItemKind.VARIABLE,
    "local": CompletionItemKind.VARIABLE,
    "localVariable": CompletionItemKind.VARIABLE,
    "locale": CompletionItemKind.VARIABLE,
    "localvar": CompletionItemKind.VARIABLE,
    "macro": CompletionItemKind.VARIABLE,
    "macroParameter": CompletionItemKind.VARIABLE,
    "macrofile": CompletionItemKind.FILE,
    "macroparam": CompletionItemKind.VARIABLE,
    "makefile": CompletionItemKind.FILE,
    "map": CompletionItemKind.VARIABLE,
    "method": CompletionItemKind.METHOD,
    "methodSpec": CompletionItemKind.METHOD,
    "minorMode": CompletionItemKind.KEYWORD,
    "misc": CompletionItemKind.VARIABLE,
    "module": CompletionItemKind.MODULE,
    "name": CompletionItemKind.VARIABLE,
    "namespace": CompletionItemKind.MODULE,
    "nettype": CompletionItemKind.TYPE_PARAMETER,
    "newFile": CompletionItemKind.FILE,
    "node": CompletionItemKind.VARIABLE,
    "object": CompletionItemKind.CLASS,
    "oneof": CompletionItemKind.ENUM,
    "operator": CompletionItemKind.OPERATOR,
    "option": CompletionItemKind.KEYWORD,
    "output": CompletionItemKind.VARIABLE,
    "package": CompletionItemKind.MODULE,
    "param": CompletionItemKind.VARIABLE,
    "parameter": CompletionItemKind.VARIABLE,
    "paramEntity": CompletionItemKind.VARIABLE,
    "part": CompletionItemKind.VARIABLE,
    "pattern": CompletionItemKind.KEYWORD,
    "placeholder": CompletionItemKind.VARIABLE,
    "port": CompletionItemKind.VARIABLE,
    "process": CompletionItemKind.FUNCTION,
    "property": CompletionItemKind.PROPERTY,
    "prototype": CompletionItemKind.VARIABLE,
    "protocol": CompletionItemKind.CLASS,
    "provider": CompletionItemKind.CLASS,
    "publication": CompletionItemKind.VARIABLE,
    "qkey": CompletionItemKind.VARIABLE,
    "receiver": CompletionItemKind.VARIABLE,
    "record": CompletionItemKind.STRUCT,
    "reference": CompletionItemKind.REFERENCE,
    "region": CompletionItemKind.VARIABLE,
    "register": CompletionItemKind.VARIABLE,
    "repoid": CompletionItemKind.VARIABLE,
    "report": CompletionItemKind.VARIABLE,
    "repositoryId": CompletionItemKind.VARIABLE,
    "repr": CompletionItemKind.VARIABLE,
    "resource": CompletionItemKind.VARIABLE,
    "response": CompletionItemKind.FUNCTION,
    "role": CompletionItemKind.CLASS,
    "rpc": CompletionItemKind.VARIABLE,
    "schema": CompletionItemKind.VARIABLE,
    "script": CompletionItemKind.FILE,
    "section": CompletionItemKind.KEYWORD,
    "selector": CompletionItemKind.KEYWORD,
    "sequence": CompletionItemKind.VARIABLE,
    "server": CompletionItemKind.CLASS,
    "service": CompletionItemKind.CLASS,
    "setter": CompletionItemKind.METHOD,
    "signal": CompletionItemKind.FUNCTION,
    "singletonMethod": CompletionItemKind.METHOD,
    "slot": CompletionItemKind.VARIABLE,
    "software": CompletionItemKind.CLASS,
    "sourcefile": CompletionItemKind.FILE,
    "standard": CompletionItemKind.VARIABLE,
    "string": CompletionItemKind.TEXT,
    "structure": CompletionItemKind.STRUCT,
    "stylesheet": CompletionItemKind.VARIABLE,
    "subdir": CompletionItemKind.FOLDER,
    "submethod": CompletionItemKind.METHOD,
    "submodule": CompletionItemKind.MODULE,
    "subprogram": CompletionItemKind.FUNCTION,
    "subprogspec": CompletionItemKind.VARIABLE,
    "subroutine": CompletionItemKind.FUNCTION,
    "subsection": CompletionItemKind.VARIABLE,
    "subst": CompletionItemKind.VARIABLE,
    "substdef": CompletionItemKind.VARIABLE,
    "tag": CompletionItemKind.VARIABLE,
    "template": CompletionItemKind.VARIABLE,
    "test": CompletionItemKind.VARIABLE,
    "theme": CompletionItemKind.VARIABLE,
    "theorem": CompletionItemKind.VARIABLE,
    "thriftFile": CompletionItemKind.FILE,
    "throwsparam": CompletionItemKind.VARIABLE,
    "title": CompletionItemKind.VARIABLE,
    "token": CompletionItemKind.VARIABLE,
    "toplevelVariable": CompletionItemKind.VARIABLE,
    "trait": CompletionItemKind.VARIABLE,
    "type": CompletionItemKind.STRUCT,
    "typealias": CompletionItemKind.VARIABLE,
    "typedef": CompletionItemKind.TYPE_PARAMETER,
    "typespec": CompletionItemKind.TYPE_PARAMETER,
    "union": CompletionItemKind.STRUCT,
    "unit": CompletionItemKind.UNIT,
    "username": CompletionItemKind.VARIABLE,
    "val": CompletionItemKind.VARIABLE,
    "value": CompletionItemKind.VARIABLE,
    "var": CompletionItemKind.VARIABLE,
    "variable": CompletionItemKind.VARIABLE,
    "vector": CompletionItemKind.VARIABLE,
    "version": CompletionItemKind.VARIABLE,
    "video": CompletionItemKind.FILE,
    "view": CompletionItemKind.VARIABLE,
    "wrapper": CompletionItemKind.VARIABLE,
    "xdata": CompletionItemKind.VARIABLE,
    "xinput": CompletionItemKind.VARIABLE,
    "xtask": CompletionItemKind.VARIABLE,
}


# ==============================================================================
# ctags kind -> SymbolKind
# ==============================================================================

SYMBOL_KINDS: Dict[str, SymbolKind] = {
    "alias": SymbolKind.VARIABLE,
    "arg": SymbolKind.VARIABLE,
    "attribute": SymbolKind.PROPERTY,
    "boolean": SymbolKind.CONSTANT,
    "callback": SymbolKind.FUNCTION,
    "category": SymbolKind.ENUM,
    "ccflag": SymbolKind.CONSTANT,
    "cell": SymbolKind.VARIABLE,
    "class": SymbolKind.CLASS,
    "collection": SymbolKind.CLASS,
    "command": SymbolKind.FUNCTION,
    "component": SymbolKind.STRUCT,
    "config": SymbolKind.CONSTANT,
    "const": SymbolKind.CONSTANT,
    "constant": SymbolKind.CONSTANT,
    "constructor": SymbolKind.CONSTRUCTOR,
    "context": SymbolKind.VARIABLE,
    "counter": SymbolKind.VARIABLE,
    "data": SymbolKind.VARIABLE,
    "dataset": SymbolKind.VARIABLE,
    "def": SymbolKind.FUNCTION,
    "define": SymbolKind.CONSTANT,
    "delegate": SymbolKind.CLASS,
    "enum": SymbolKind.ENUM,
    "enumConstant": SymbolKind.ENUM_MEMBER,
    "enumerator": SymbolKind.ENUM,
    "environment": SymbolKind.VARIABLE,
    "error": SymbolKind.ENUM,
    "event": SymbolKind.EVENT,
    "exception": SymbolKind.CLASS,
    "externvar": SymbolKind.VARIABLE,
    "face": SymbolKind.INTERFACE,
    "feature": SymbolKind.PROPERTY,
    "field": SymbolKind.FIELD,
    "fn": SymbolKind.FUNCTION,
    "fun": SymbolKind.FUNCTION,
    "func": SymbolKind.FUNCTION,
    "function": SymbolKind.FUNCTION,
    "functionVar": SymbolKind.VARIABLE,
    "functor": SymbolKind.CLASS,
    "generic": SymbolKind.TYPE_PARAMETER,
    "getter": SymbolKind.METHOD,
    "global": SymbolKind.VARIABLE,
    "globalVar": SymbolKind.VARIABLE,
    "group": SymbolKind.ENUM,
    "guard": SymbolKind.VARIABLE,
    "handler": SymbolKind.FUNCTION,
    "icon": SymbolKind.ENUM,
    "id": SymbolKind.VARIABLE,
    "implementation": SymbolKind.CLASS,
    "index": SymbolKind.VARIABLE,
    "infoitem": SymbolKind.VARIABLE,
    "instance": SymbolKind.VARIABLE,
    "interface": SymbolKind.INTERFACE,
    "it": SymbolKind.VARIABLE,
    "jurisdiction": SymbolKind.VARIABLE,
    "library": SymbolKind.MODULE,
    "list": SymbolKind.VARIABLE,
    "local": SymbolKind.VARIABLE,
    "localVariable": SymbolKind.VARIABLE,
    "locale": SymbolKind.VARIABLE,
    "localvar": SymbolKind.VARIABLE,
    "macro": SymbolKind.VARIABLE,
    "macroParameter": SymbolKind.VARIABLE,
    "macrofile": SymbolKind.FILE,
    "macroparam": SymbolKind.VARIABLE,
    "makefile": SymbolKind.FILE,
    "map": SymbolKind.VARIABLE,
    "method": SymbolKind.METHOD,
    "methodSpec": SymbolKind.METHOD,
    "misc": SymbolKind.VARIABLE,
    "module": SymbolKind.MODULE,
    "name": SymbolKind.VARIABLE,
    "namespace": SymbolKind.MODULE,
    "nettype": SymbolKind.TYPE_PARAMETER,
    "newFile": SymbolKind.FILE,
    "node": SymbolKind.VARIABLE,
    "object": SymbolKind.CLASS,
    "oneof": SymbolKind.ENUM,
    "operator": SymbolKind.OPERATOR,
    "output": SymbolKind.VARIABLE,
    "package": SymbolKind.MODULE,
    "param": SymbolKind.VARIABLE,
    "parameter": SymbolKind.VARIABLE,
    "paramEntity": SymbolKind.VARIABLE,
    "part": SymbolKind.VARIABLE,
    "placeholder": SymbolKind.VARIABLE,
    "port": SymbolKind.VARIABLE,
    "process": SymbolKind.FUNCTION,
    "property": SymbolKind.PROPERTY,
    "prototype": SymbolKind.VARIABLE,
    "protocol": SymbolKind.CLASS,
    "provider": SymbolKind.CLASS,
    "publication": SymbolKind.VARIABLE,
    "qkey": SymbolKind.VARIABLE,
    "receiver": SymbolKind.VARIABLE,
    "record": SymbolKind.STRUCT,
    "region": SymbolKind.VARIABLE,
    "register": SymbolKind.VARIABLE,
    "repoid": SymbolKind.VARIABLE,
    "report": SymbolKind.VARIABLE,
    "repositoryId": SymbolKind.VARIABLE,
    "repr": SymbolKind.VARIABLE,
    "resource": SymbolKind.VARIABLE,
    "response": SymbolKind.FUNCTION,
    "role": SymbolKind.CLASS,
    "rpc": SymbolKind.VARIABLE,
    "schema": SymbolKind.VARIABLE,
    "script": SymbolKind.FILE,
    "sequence": SymbolKind.VARIABLE,
    "server": SymbolKind.CLASS,
    "service": SymbolKind.CLASS,
    "setter": SymbolKind.METHOD,
    "signal": SymbolKind.FUNCTION,
    "singletonMethod": SymbolKind.METHOD,
    "slot": SymbolKind.VARIABLE,
    "software": SymbolKind.CLASS,
    "sourcefile": SymbolKind.FILE,
    "standard": SymbolKind.VARIABLE,
    "string": SymbolKind.STRING,
    "structure": SymbolKind.STRUCT,
    "stylesheet": SymbolKind.VARIABLE,
    "submethod": SymbolKind.METHOD,
    "submodule": SymbolKind.MODULE,
    "subprogram": SymbolKind.FUNCTION,
    "subprogspec": SymbolKind.VARIABLE,
    "subroutine": SymbolKind.FUNCTION,
    "subsection": SymbolKind.VARIABLE,
    "subst": SymbolKind.VARIABLE,
    "substdef": SymbolKind.VARIABLE,
    "tag": SymbolKind.VARIABLE,
    "template": SymbolKind.VARIABLE,
    "test": SymbolKind.VARIABLE,
    "theme": SymbolKind.VARIABLE,
    "theorem": SymbolKind.VARIABLE,
    "thriftFile": SymbolKind.FILE,
    "throwsparam": SymbolKind.VARIABLE,
    "title": SymbolKind.VARIABLE,
    "token": SymbolKind.VARIABLE,
    "toplevelVariable": SymbolKind.VARIABLE,
    "trait": SymbolKind.VARIABLE,
    "type": SymbolKind.STRUCT,
    "typealias": SymbolKind.VARIABLE,
    "typedef": SymbolKind.TYPE_PARAMETER,
    "typespec": SymbolKind.TYPE_PARAMETER,
    "union": SymbolKind.STRUCT,
    "username": SymbolKind.VARIABLE,
    "val": SymbolKind.VARIABLE,
    "value": SymbolKind.VARIABLE,
    "var": SymbolKind.VARIABLE,
    "variable": SymbolKind.VARIABLE,
    "vector": SymbolKind.VARIABLE,
    "version": SymbolKind.VARIABLE,
    "video": SymbolKind.FILE,
    "view": SymbolKind.VARIABLE,
    "wrapper": SymbolKind.VARIABLE,
    "xdata": SymbolKind.VARIABLE,
    "xinput": SymbolKind.VARIABLE,
    "xtask": SymbolKind.VARIABLE,
}


def completion_kind(ctags_kind: str) -> CompletionItemKind:
    """
    Map a ctags kind name to a completion item kind.

    Args:
        ctags_kind: Kind name as reported by ctags (case-sensitive)

    Returns:
        The mapped kind, or CompletionItemKind.TEXT for unknown kinds
    """
    return COMPLETION_KINDS.get(ctags_kind, CompletionItemKind.TEXT)


def symbol_kind(ctags_kind: str) -> Optional[SymbolKind]:
    """
    Map a ctags kind name to a symbol kind.

    Args:
        ctags_kind: Kind name as reported by ctags (case-sensitive)

    Returns:
        The mapped kind, or None when the kind has no symbol category
    """
    return SYMBOL_KINDS.get(ctags_kind)
