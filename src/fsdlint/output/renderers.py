"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from itertools import groupby
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from fsdlint.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from fsdlint.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal, grep-friendly output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    if result.op == "lint":
        return "\n".join(_violation_line(v) for v in result.data.get("violations", []))
    if result.op == "rules":
        return "\n".join(item["id"] for item in result.data.get("items", []) if item["enabled"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _location(violation: dict[str, Any]) -> tuple[str, int | None]:
    loc = violation.get("location", {})
    return str(loc.get("path", "")), loc.get("line")


def _violation_line(violation: dict[str, Any]) -> str:
    path, line = _location(violation)
    where = f"{path}:{line}" if line is not None else path
    return f"{where}: [{violation['rule']}] {violation['message']}"


def _status_line(console: Console, result: ServiceResult, *, label: str = "OK") -> None:
    style = "fsd.ok" if label == "OK" else "fsd.error"
    console.print(Text(label, style=style), Text(result.op, style="fsd.op"))


def _render_warnings(console: Console, result: ServiceResult) -> None:
    for warning in result.warnings:
        console.print(Text("  warning:", style="fsd.warning"), Text(warning))


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        console.print(Text(f"    {key}: {value}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_lint(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    violations: list[dict[str, Any]] = result.data.get("violations", [])
    files_checked = result.data.get("files_checked", 0)

    if not violations:
        _status_line(console, result)
        console.print(Text(f"  {files_checked} file(s) checked, no violations", style="fsd.key"))
    else:
        for path, group in groupby(violations, key=lambda v: _location(v)[0]):
            console.print(Text(path, style="fsd.path"))
            table = Table(show_header=False, show_lines=False, pad_edge=False, box=None)
            table.add_column("Line", style="fsd.line", justify="right")
            table.add_column("Rule", style="fsd.rule", no_wrap=True)
            table.add_column("Message")
            for violation in group:
                line = _location(violation)[1]
                table.add_row(
                    "" if line is None else str(line),
                    violation["rule"],
                    Text(violation["message"]),
                )
            console.print(table)
            console.print()
        summary = f"{len(violations)} problem(s) in {files_checked} file(s) checked"
        console.print(Text(summary, style="fsd.error"))

    _render_warnings(console, result)
    if verbose:
        _render_meta(console, result)


def _render_rules(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Rule", style="fsd.rule", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Enabled", justify="center")
    table.add_column("Presets")
    if verbose:
        table.add_column("Description")

    for item in result.data.get("items", []):
        row: list[Any] = [
            item["id"],
            Text(item["kind"], style=style_for_kind(item["kind"])),
            "yes" if item["enabled"] else "-",
            ", ".join(item["presets"]),
        ]
        if verbose:
            row.append(Text(item["description"]))
        table.add_row(*row)
    console.print(table)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        console.print(Text(f"  {key}:", style="fsd.key"), Text(str(value)))
    _render_warnings(console, result)
    if verbose:
        _render_meta(console, result)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result, label="ERROR")
    if result.error is None:
        console.print("  Unknown error")
        return
    console.print(Text(f"  {result.error.message}", style="fsd.error"))
    if verbose:
        console.print(Text(f"  code: {result.error.code}", style="fsd.key"))
        for key, value in result.error.detail.items():
            console.print(Text(f"  {key}:", style="fsd.key"), Text(str(value)))


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "lint": _render_lint,
    "rules": _render_rules,
}
