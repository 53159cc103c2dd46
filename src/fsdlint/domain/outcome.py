"""Tagged outcomes for fallible capabilities.

Filesystem and glob capabilities return one of these instead of
raising, so call sites decide explicitly what a missing path or a
fault means for them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """The capability produced a value."""

    value: T


@dataclass(frozen=True)
class Missing:
    """The path does not exist."""

    path: str


@dataclass(frozen=True)
class Fault:
    """The capability failed (permission error, broken entry, bad pattern)."""

    reason: str
