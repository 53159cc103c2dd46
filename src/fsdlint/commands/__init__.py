"""Subcommand modules for fsdlint.

Provides register_commands() which uses deferred imports to keep
``fsdlint --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from fsdlint.commands.check import check
    from fsdlint.commands.rules import rules

    cli.add_command(check)
    cli.add_command(rules)
