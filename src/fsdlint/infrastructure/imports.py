"""Lexical extraction of import specifiers from JS/TS/Vue sources.

This is not a parser. It recognises the literal-string forms of
static imports, re-exports, dynamic ``import()`` and ``require()``;
specifiers built from expressions are never reported.
"""

from __future__ import annotations

import re
from typing import NamedTuple

_STRING = r"""(?P<q>['"`])(?P<spec>[^'"`\n$]*?)(?P=q)"""

# import x from 'a' / import {a, b} from 'a' / export * from 'a' / import type T from 'a'
_FROM_RE = re.compile(
    r"""(?:^|[;\s}])(?:import|export)\b[^'"`;()]*?\bfrom\s*""" + _STRING,
    re.MULTILINE,
)
# import 'side-effect'
_BARE_IMPORT_RE = re.compile(r"""(?:^|[;\s])import\s*""" + _STRING, re.MULTILINE)
# import('a') / require('a')
_CALL_RE = re.compile(r"""(?<![\w$.])(?:import|require)\s*\(\s*""" + _STRING + r"""\s*[,)]""")

# String and template literals are matched first so comment markers inside
# them (``'./modules/*.ts'``, ``'https://...'``) are left alone.
_COMMENT_OR_STRING_RE = re.compile(
    r"""(?P<str>'(?:\\.|[^'\\\n])*'|"(?:\\.|[^"\\\n])*"|`(?:\\.|[^`\\])*`)"""
    r"""|(?P<comment>/\*.*?\*/|//[^\n]*)""",
    re.DOTALL,
)
_SCRIPT_RE = re.compile(r"<script\b[^>]*>(?P<body>.*?)</script>", re.DOTALL | re.IGNORECASE)


class ImportRef(NamedTuple):
    """A literal import specifier and the 1-based line it appears on."""

    specifier: str
    line: int


def _blank_comment(match: re.Match[str]) -> str:
    if match.group("comment") is None:
        return match.group(0)
    # Keep newlines so line numbers survive comment removal.
    return re.sub(r"[^\n]", " ", match.group(0))


def _strip_comments(text: str) -> str:
    return _COMMENT_OR_STRING_RE.sub(_blank_comment, text)


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def extract_script_imports(text: str, *, line_offset: int = 0) -> list[ImportRef]:
    """Find literal import specifiers in JavaScript/TypeScript *text*."""
    code = _strip_comments(text)
    found: dict[int, ImportRef] = {}
    for pattern in (_FROM_RE, _BARE_IMPORT_RE, _CALL_RE):
        for match in pattern.finditer(code):
            spec = match.group("spec")
            if not spec:
                continue
            start = match.start("spec")
            found.setdefault(start, ImportRef(spec, _line_of(code, start) + line_offset))
    return [found[key] for key in sorted(found)]


def extract_imports(text: str, *, filename: str = "") -> list[ImportRef]:
    """Find literal import specifiers in a source file.

    For ``.vue`` files only the ``<script>`` blocks are scanned; line
    numbers still refer to the whole file.
    """
    if not filename.endswith(".vue"):
        return extract_script_imports(text)

    refs: list[ImportRef] = []
    for block in _SCRIPT_RE.finditer(text):
        body_start = block.start("body")
        refs.extend(
            extract_script_imports(block.group("body"), line_offset=_line_of(text, body_start) - 1)
        )
    return refs
