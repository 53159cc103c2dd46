"""Import boundary rules: layer direction and slice isolation.

Static imports, dynamic ``import()`` and ``require()`` are treated
identically; only literal specifiers ever reach these rules.
"""

from __future__ import annotations

from functools import cached_property

from fsdlint.config.models import NoCrossSliceImportsOptions, NoHigherLevelImportsOptions
from fsdlint.domain.layers import Coordinate, LayerOrder
from fsdlint.domain.violations import Location, MessageId
from fsdlint.infrastructure.imports import ImportRef
from fsdlint.services.base import FileScope, ImportRule, RuleContext


class NoHigherLevelImportsRule(ImportRule):
    """A layer may import from itself and the layers below it, never above.

    With the default order ``features`` may use ``entities`` and
    ``shared`` but not ``widgets``, ``pages`` or ``app``.
    """

    rule_id = "no-higher-level-imports"
    description = "Forbid importing from higher FSD layers."
    options_model = NoHigherLevelImportsOptions
    messages = {
        MessageId.FORBIDDEN: (
            'Import from higher layer "{imported}" is forbidden in "{current}" file.'
        ),
    }

    options: NoHigherLevelImportsOptions

    @cached_property
    def order(self) -> LayerOrder:
        return LayerOrder(self.options.layers)

    def evaluate(
        self,
        ctx: RuleContext,
        scope: FileScope,
        ref: ImportRef,
        imported: Coordinate,
    ) -> None:
        current = scope.coordinate.layer
        if self.order.is_above(imported.layer, current):
            self.report(
                ctx,
                Location(path=scope.path, line=ref.line),
                MessageId.FORBIDDEN,
                imported=imported.layer,
                current=current,
                import_path=ref.specifier,
            )


class NoCrossSliceImportsRule(ImportRule):
    """Slices on the same layer never import each other directly."""

    rule_id = "no-cross-slice-imports"
    description = "Forbid cross-imports between slices on the same layer."
    options_model = NoCrossSliceImportsOptions
    messages = {
        MessageId.FORBIDDEN: (
            'Cross-slice import "{import_path}" is forbidden inside the same layer "{layer}".'
        ),
    }

    options: NoCrossSliceImportsOptions

    def scope_for(self, path: str) -> FileScope | None:
        scope = super().scope_for(path)
        # Layer-root files belong to no slice, so there is nothing to isolate.
        if scope is None or scope.coordinate.slice is None:
            return None
        return scope

    def evaluate(
        self,
        ctx: RuleContext,
        scope: FileScope,
        ref: ImportRef,
        imported: Coordinate,
    ) -> None:
        current = scope.coordinate
        if imported.layer != current.layer:
            return
        if imported.slice is None or imported.slice == current.slice:
            return
        self.report(
            ctx,
            Location(path=scope.path, line=ref.line),
            MessageId.FORBIDDEN,
            import_path=ref.specifier,
            layer=current.layer,
            slice=current.slice,
            imported_slice=imported.slice,
        )


IMPORT_RULES: tuple[type[ImportRule], ...] = (NoHigherLevelImportsRule, NoCrossSliceImportsRule)
