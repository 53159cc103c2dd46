"""LintService — drives files and import specifiers through the rules.

This is the host side of the engine: it discovers source files,
extracts literal import specifiers, triggers the (session-gated)
structural rules and runs the import rules for each file. All rules
report into one :class:`ViolationSink`.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from fsdlint.domain.outcome import Ok
from fsdlint.domain.violations import Location, Violation
from fsdlint.infrastructure.filesystem import FileSystem, find_source_files, relative_posix
from fsdlint.infrastructure.imports import ImportRef, extract_imports
from fsdlint.services.base import BaseRule, ImportRule, RuleContext, StructureRule, ViolationSink
from fsdlint.services.registry import RuleRegistry, UnknownRuleError
from fsdlint.services.result import ServiceResult
from fsdlint.services.session import LintSession, get_session

if TYPE_CHECKING:
    from fsdlint.config.settings import FsdSettings
    from fsdlint.plugins.manager import PluginManager

log = structlog.get_logger(__name__)


class LintService:
    """Lints a project tree according to :class:`FsdSettings`.

    Args:
        settings: Resolved configuration; paths are relative to
            ``settings.project_root``.
        session: Run-once gate for structural rules. Defaults to the
            process-wide session.
        fs: Filesystem capability (tests pass a rooted or faulty one).
        plugins: Loaded plugin manager contributing rules and hooks.
        src: Override for every rule's ``src`` option.
    """

    def __init__(
        self,
        settings: FsdSettings,
        *,
        session: LintSession | None = None,
        fs: FileSystem | None = None,
        plugins: PluginManager | None = None,
        registry: RuleRegistry | None = None,
        src: str | None = None,
    ) -> None:
        self._settings = settings
        self._session = session or get_session()
        self._fs = fs or FileSystem(settings.project_root)
        self._plugins = plugins
        self._registry = registry or RuleRegistry.with_plugins(plugins)
        self._src = src
        self._rules: list[BaseRule] | None = None

    @property
    def session(self) -> LintSession:
        return self._session

    @property
    def rules(self) -> list[BaseRule]:
        """Enabled rules, built once (raises on invalid configuration)."""
        if self._rules is None:
            self._rules = self._registry.build(
                self._settings.lint,
                self._settings.rules,
                src=self._src,
            )
        return self._rules

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def lint_paths(self, paths: Sequence[str | Path] | None = None) -> ServiceResult:
        """Lint every source file under *paths* (default: the project root)."""
        try:
            rules = self.rules
        except (UnknownRuleError, ValidationError, ValueError) as exc:
            return ServiceResult.failure("lint", "INVALID_CONFIG", str(exc))

        root = self._settings.project_root
        targets = [Path(p) for p in paths] if paths else None
        files = find_source_files(root, targets, exclude=self._settings.lint.exclude)
        if not files:
            return ServiceResult.failure(
                "lint",
                "NO_FILES",
                "No source files found to lint",
                paths=[str(p) for p in (targets or [root])],
            )

        log.debug("lint_started", files=len(files), rules=[r.rule_id for r in rules])
        sink = ViolationSink()
        warnings: list[str] = []
        for path in files:
            self.lint_file(path, sink=sink, warnings=warnings)

        violations = sink.violations
        if self._plugins is not None:
            self._plugins.notify(
                "post_lint",
                {"violations_found": len(violations), "files_checked": len(files)},
                warnings,
            )
        log.debug("lint_finished", violations=len(violations), files=len(files))

        return ServiceResult(
            ok=True,
            op="lint",
            data={
                "violations": [v.model_dump(mode="json") for v in violations],
                "count": len(violations),
                "files_checked": len(files),
                "clean": not violations,
            },
            warnings=warnings,
            meta={
                "session_id": self._session.session_id,
                "rules": [r.rule_id for r in rules],
                "structure_rules_run": sorted(self._session.executed),
            },
        )

    def lint_file(
        self,
        path: str | Path,
        source: str | None = None,
        *,
        sink: ViolationSink | None = None,
        warnings: list[str] | None = None,
    ) -> list[Violation]:
        """Lint one file, reading it unless *source* is given.

        An unreadable file still triggers the structural rules; only its
        imports go unchecked.
        """
        display = relative_posix(self._fs.resolve(path), self._settings.project_root)
        refs: list[ImportRef] = []
        if source is None:
            outcome = self._fs.read_text(path)
            if isinstance(outcome, Ok):
                source = outcome.value
            else:
                log.warning("file_unreadable", path=display, outcome=repr(outcome))
                if warnings is not None:
                    warnings.append(f"Could not read {display}")
        if source is not None:
            refs = extract_imports(source, filename=display)
        return self.lint_source(display, refs, sink=sink)

    def lint_source(
        self,
        path: str,
        imports: Iterable[ImportRef | tuple[str, int]],
        *,
        sink: ViolationSink | None = None,
    ) -> list[Violation]:
        """Run every enabled rule for *path* and its import specifiers.

        Returns the violations reported during this call only.
        """
        sink = sink if sink is not None else ViolationSink()
        before = len(sink)
        ctx = RuleContext(fs=self._fs, sink=sink, session=self._session)
        refs = [ref if isinstance(ref, ImportRef) else ImportRef(*ref) for ref in imports]
        location = Location(path=path)

        for rule in self.rules:
            if isinstance(rule, StructureRule):
                rule.run(ctx, location)
            elif isinstance(rule, ImportRule):
                rule.check_file(ctx, path, refs)
        return sink.violations[before:]
