"""Command: lint a feature-sliced source tree."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from fsdlint.commands._base import FsdCommand

if TYPE_CHECKING:
    from fsdlint.commands._context import AppContext


@click.command(
    cls=FsdCommand,
    examples="""\
  fsdlint check
  fsdlint check src/features
  fsdlint check --preset all
  fsdlint check --select no-higher-level-imports --select no-cross-slice-imports
  fsdlint check --disable public-api
  fsdlint --json check --src frontend/src""",
)
@click.argument("paths", nargs=-1, type=click.Path(path_type=Path))
@click.option(
    "--preset",
    type=click.Choice(["recommended", "all"]),
    default=None,
    help="Rule preset (overrides [lint] preset).",
)
@click.option("--select", multiple=True, help="Run only this rule id (repeatable).")
@click.option("--disable", multiple=True, help="Skip this rule id (repeatable).")
@click.option("--src", default=None, help="Source root for every rule (overrides config).")
@click.pass_obj
def check(
    app: AppContext,
    paths: tuple[Path, ...],
    preset: str | None,
    select: tuple[str, ...],
    disable: tuple[str, ...],
    src: str | None,
) -> None:
    """Check files against feature-sliced design rules.

    Exits 1 when any violation is found.
    """
    from fsdlint.services.lint import LintService
    from fsdlint.services.session import LintSession

    settings = app.settings
    updates: dict[str, Any] = {}
    if preset:
        updates["preset"] = preset
    if select:
        updates["select"] = list(select)
    if disable:
        updates["disable"] = [*settings.lint.disable, *disable]
    if updates:
        settings = settings.with_overrides(lint=settings.lint.model_copy(update=updates))

    # Each CLI invocation is its own analysis session.
    svc = LintService(settings, session=LintSession(), plugins=app.plugins, src=src)
    result = svc.lint_paths([p.resolve() for p in paths] or None)
    app.emit(result)
    if not result.data.get("clean", True):
        raise SystemExit(1)
