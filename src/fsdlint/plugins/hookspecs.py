"""Pluggy hook specifications for fsdlint.

One setup-time hook lets plugins contribute rule classes; one
notification hook fires after each lint run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from fsdlint.services.base import BaseRule

hookspec = pluggy.HookspecMarker("fsdlint")
hookimpl = pluggy.HookimplMarker("fsdlint")


class FsdlintHookSpec:
    """Hook specifications for the fsdlint plugin system."""

    @hookspec
    def register_rules(self) -> list[type[BaseRule]] | None:
        """Return additional rule classes (StructureRule or ImportRule subclasses)."""

    @hookspec
    def post_lint(self, violations_found: int, files_checked: int) -> None:
        """Called after a lint run completes."""
