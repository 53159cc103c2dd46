"""Command: list available rules."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fsdlint.commands._base import FsdCommand

if TYPE_CHECKING:
    from fsdlint.commands._context import AppContext


@click.command(
    cls=FsdCommand,
    examples="""\
  fsdlint rules
  fsdlint rules --preset all
  fsdlint -v rules
  fsdlint --json rules""",
)
@click.option(
    "--preset",
    type=click.Choice(["recommended", "all"]),
    default=None,
    help="Show which rules this preset enables.",
)
@click.pass_obj
def rules(app: AppContext, preset: str | None) -> None:
    """List rules and whether the current configuration enables them."""
    from fsdlint.services.registry import RuleCatalogService, RuleRegistry

    registry = RuleRegistry.with_plugins(app.plugins)
    app.emit(RuleCatalogService(app.settings, registry).list_rules(preset=preset))
