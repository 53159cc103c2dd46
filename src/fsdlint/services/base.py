"""Rule foundations — the report sink and the two rule kinds.

Structural rules inspect the whole source tree and are gated so they
run once per :class:`~fsdlint.services.session.LintSession`. Import
rules are evaluated per file against every import specifier it holds.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, NamedTuple

from fsdlint.config.models import RuleOptions
from fsdlint.domain.layers import Coordinate, classify_import, classify_path
from fsdlint.domain.violations import Location, MessageId, RuleKind, Violation, render_message
from fsdlint.infrastructure.filesystem import FileSystem
from fsdlint.infrastructure.imports import ImportRef
from fsdlint.infrastructure.patterns import is_ignored
from fsdlint.services.session import LintSession

logger = logging.getLogger(__name__)


class ViolationSink:
    """Single report point for every rule.

    Each call records exactly one violation; nothing is retried,
    batched, or deduplicated.
    """

    def __init__(self) -> None:
        self._violations: list[Violation] = []

    def report(self, violation: Violation) -> Violation:
        self._violations.append(violation)
        return violation

    @property
    def violations(self) -> list[Violation]:
        return list(self._violations)

    def __len__(self) -> int:
        return len(self._violations)


@dataclass
class RuleContext:
    """Collaborators handed to a rule for one invocation."""

    fs: FileSystem
    sink: ViolationSink
    session: LintSession


class BaseRule:
    """Common identity, options, and reporting for all rules."""

    rule_id: ClassVar[str]
    description: ClassVar[str]
    kind: ClassVar[RuleKind]
    options_model: ClassVar[type[RuleOptions]] = RuleOptions
    messages: ClassVar[dict[MessageId, str]] = {}

    def __init__(self, options: RuleOptions | Mapping[str, Any] | None = None) -> None:
        if isinstance(options, RuleOptions):
            self.options = options
        else:
            self.options = self.options_model.model_validate(dict(options or {}))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.options!r})"

    def report(
        self,
        ctx: RuleContext,
        location: Location,
        message_id: MessageId,
        **data: Any,
    ) -> Violation:
        template = self.messages.get(message_id, message_id.value)
        return ctx.sink.report(
            Violation(
                rule=self.rule_id,
                message_id=message_id,
                message=render_message(template, data),
                location=location,
                data=data,
            )
        )


class StructureRule(BaseRule):
    """A whole-tree audit, run at most once per session."""

    kind = RuleKind.STRUCTURE

    def run(self, ctx: RuleContext, location: Location) -> bool:
        """Audit the tree unless this rule already ran in the session.

        Returns True when the audit actually executed.
        """
        if not ctx.session.claim(self.rule_id):
            return False
        self.audit(ctx, location)
        return True

    def audit(self, ctx: RuleContext, location: Location) -> None:
        raise NotImplementedError


class FileScope(NamedTuple):
    """The analysed file: its path and its own coordinate."""

    path: str
    coordinate: Coordinate


class ImportRule(BaseRule):
    """A per-file check applied to each import specifier."""

    kind = RuleKind.IMPORTS

    def scope_for(self, path: str) -> FileScope | None:
        """Decide whether *path* is checked at all.

        Files outside the source root, outside the configured layers,
        or matching an ignore pattern get no scope.
        """
        coordinate = classify_path(path, self.options.src)
        if coordinate is None or coordinate.layer not in self.layers:
            return None
        if is_ignored(path, self.ignore):
            return None
        return FileScope(path, coordinate)

    @property
    def layers(self) -> list[str]:
        return list(getattr(self.options, "layers", []))

    @property
    def ignore(self) -> list[str]:
        return list(getattr(self.options, "ignore", []))

    def check_file(self, ctx: RuleContext, path: str, imports: Iterable[ImportRef]) -> None:
        scope = self.scope_for(path)
        if scope is None:
            return
        for ref in imports:
            try:
                self._check_import(ctx, scope, ref)
            except Exception:
                # One bad specifier must not stop the remaining imports.
                logger.debug(
                    "Skipping import %r in %s for %s",
                    ref.specifier,
                    path,
                    self.rule_id,
                    exc_info=True,
                )

    def _check_import(self, ctx: RuleContext, scope: FileScope, ref: ImportRef) -> None:
        if is_ignored(ref.specifier, self.ignore):
            return
        imported = classify_import(ref.specifier, self.options.src)
        if imported is None or imported.layer not in self.layers:
            return
        self.evaluate(ctx, scope, ref, imported)

    def evaluate(
        self,
        ctx: RuleContext,
        scope: FileScope,
        ref: ImportRef,
        imported: Coordinate,
    ) -> None:
        raise NotImplementedError
