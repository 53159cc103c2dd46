"""Glob matching capability and the ignore predicate.

Patterns use minimatch-style semantics: ``**`` spans directories,
``*`` stops at ``/``, braces and extglobs expand.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from wcmatch import glob

from fsdlint.domain.outcome import Fault, Ok

GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.EXTGLOB

logger = logging.getLogger(__name__)


def match_pattern(text: str, pattern: str) -> Ok[bool] | Fault:
    """Match *text* against a single glob *pattern*.

    Pathological patterns (e.g. brace expansions past wcmatch's limit)
    come back as a Fault rather than raising.
    """
    if not isinstance(text, str) or not isinstance(pattern, str):
        return Fault(f"non-string pattern input: {pattern!r}")
    try:
        return Ok(glob.globmatch(text, pattern, flags=GLOB_FLAGS))
    except Exception as exc:
        return Fault(f"{type(exc).__name__}: {exc}")


def is_ignored(value: str, patterns: Sequence[str] | None) -> bool:
    """Return True when *value* matches any of *patterns*.

    A faulty pattern never exempts a value; it is treated as a miss.
    """
    if not patterns or isinstance(patterns, str) or not isinstance(patterns, Sequence):
        return False
    for pattern in patterns:
        outcome = match_pattern(value, pattern)
        if isinstance(outcome, Fault):
            logger.debug("Ignoring faulty pattern %r: %s", pattern, outcome.reason)
            continue
        if outcome.value:
            return True
    return False
