"""Structural audits of the on-disk layer tree.

Every rule here looks at directories, not at the file that triggered
it, and is gated to run once per session. Filesystem faults on one
entry skip that entry; a fault at the top ends the audit silently.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from fsdlint.config.models import (
    FsdLayersOptions,
    NoLayerPublicApiOptions,
    PublicApiOptions,
    SrcOnlyOptions,
)
from fsdlint.domain.layers import APP_LAYER, DEPRECATED_LAYER
from fsdlint.domain.outcome import Fault, Ok
from fsdlint.domain.violations import Location, MessageId
from fsdlint.infrastructure.filesystem import FileSystem
from fsdlint.infrastructure.patterns import is_ignored
from fsdlint.services.base import RuleContext, StructureRule

logger = logging.getLogger(__name__)

UI_SEGMENT = "ui"


def _entries(fs: FileSystem, path: Path) -> list[str] | None:
    """Directory listing, or None when it cannot be read."""
    outcome = fs.list_entries(path)
    if isinstance(outcome, Ok):
        return outcome.value
    if isinstance(outcome, Fault):
        logger.debug("Cannot list %s: %s", path, outcome.reason)
    return None


def _is_file_or_dir(fs: FileSystem, path: Path) -> bool:
    outcome = fs.stat(path)
    return isinstance(outcome, Ok) and (outcome.value.is_dir or outcome.value.is_file)


class FsdLayersRule(StructureRule):
    """Only allowed entries in the source root, and every required one present."""

    rule_id = "fsd-layers"
    description = "Enforce consistent layer structure in feature-sliced design."
    options_model = FsdLayersOptions
    messages = {
        MessageId.INVALID_SRC: 'Source directory "{src}" does not exist or is not a directory.',
        MessageId.MISSING_REQUIRED: 'Required FSD layer "{name}" is missing in {src}.',
        MessageId.NOT_ALLOWED: 'FSD layer "{name}" is not allowed in {src}. Allowed: {allowed}.',
    }

    options: FsdLayersOptions

    def audit(self, ctx: RuleContext, location: Location) -> None:
        opts = self.options
        root = Path(opts.src)
        outcome = ctx.fs.stat(root)
        if isinstance(outcome, Fault):
            logger.debug("Cannot stat %s: %s", root, outcome.reason)
            return
        if not (isinstance(outcome, Ok) and outcome.value.is_dir):
            # Nothing to validate against when neither list is configured.
            if opts.required or opts.allowed:
                self.report(ctx, location, MessageId.INVALID_SRC, src=opts.src)
            return

        listing = _entries(ctx.fs, root)
        if listing is None:
            return
        present = [
            entry
            for entry in listing
            if not is_ignored(entry, opts.ignore) and _is_file_or_dir(ctx.fs, root / entry)
        ]

        for name in opts.required:
            if name not in present:
                self.report(ctx, location, MessageId.MISSING_REQUIRED, name=name, src=opts.src)

        if opts.allowed:
            allowed = ", ".join(opts.allowed)
            for entry in present:
                if entry not in opts.allowed:
                    self.report(
                        ctx,
                        location,
                        MessageId.NOT_ALLOWED,
                        name=entry,
                        src=opts.src,
                        allowed=allowed,
                    )


class NoProcessesLayerRule(StructureRule):
    """The deprecated ``processes`` layer must not exist."""

    rule_id = "no-processes-layer"
    description = "Disallow the deprecated `processes` folder inside the source directory."
    options_model = SrcOnlyOptions
    messages = {
        MessageId.FORBIDDEN: "Do not use a `processes` folder inside {src} (deprecated layer).",
    }

    def audit(self, ctx: RuleContext, location: Location) -> None:
        listing = _entries(ctx.fs, Path(self.options.src))
        if listing is None:
            return
        if DEPRECATED_LAYER in listing:
            self.report(ctx, location, MessageId.FORBIDDEN, src=self.options.src)


class PublicApiRule(StructureRule):
    """Every slice exposes exactly one public entry file."""

    rule_id = "public-api"
    description = "Enforce consistent public API structure in FSD slices."
    options_model = PublicApiOptions
    messages = {
        MessageId.MISSING_PUBLIC_API: (
            'Slice "{slice}" in layer "{layer}" is missing a public API file ({filename}).'
        ),
        MessageId.INVALID_PUBLIC_API: (
            'Slice "{slice}" in layer "{layer}" has an invalid public API file "{file}". '
            "Expected {filename}."
        ),
    }

    options: PublicApiOptions

    def audit(self, ctx: RuleContext, location: Location) -> None:
        root = Path(self.options.src)
        if not ctx.fs.is_dir(root):
            # A missing source root is reported by fsd-layers.
            return
        for layer in self.options.layers:
            layer_path = root / layer
            if not ctx.fs.is_dir(layer_path):
                continue
            for slice_name in self._slices(ctx.fs, layer_path):
                self._check_slice(ctx, location, layer, slice_name, layer_path / slice_name)

    def _slices(self, fs: FileSystem, layer_path: Path) -> list[str]:
        listing = _entries(fs, layer_path) or []
        return [
            entry
            for entry in listing
            if not is_ignored(entry, self.options.ignore) and fs.is_dir(layer_path / entry)
        ]

    def _check_slice(
        self,
        ctx: RuleContext,
        location: Location,
        layer: str,
        slice_name: str,
        slice_path: Path,
    ) -> None:
        listing = _entries(ctx.fs, slice_path)
        if listing is None:
            return
        filename = self.options.filename
        entry_stem = PurePosixPath(filename).stem

        if filename not in listing:
            self.report(
                ctx,
                location,
                MessageId.MISSING_PUBLIC_API,
                slice=slice_name,
                layer=layer,
                filename=filename,
            )
        for entry in listing:
            if entry != filename and PurePosixPath(entry).stem == entry_stem:
                self.report(
                    ctx,
                    location,
                    MessageId.INVALID_PUBLIC_API,
                    slice=slice_name,
                    layer=layer,
                    file=entry,
                    filename=filename,
                )


class NoLayerPublicApiRule(StructureRule):
    """Public entry files belong to slices, never to a layer root."""

    rule_id = "no-layer-public-api"
    description = "Forbid layer-level public API files at the root of layers."
    options_model = NoLayerPublicApiOptions
    messages = {
        MessageId.FORBIDDEN: (
            'Do not place a layer-level public API file "{filename}" inside layer "{layer}".'
        ),
    }

    options: NoLayerPublicApiOptions

    def audit(self, ctx: RuleContext, location: Location) -> None:
        root = Path(self.options.src)
        if not ctx.fs.is_dir(root):
            return
        for entry in _entries(ctx.fs, root) or []:
            if is_ignored(entry, self.options.ignore):
                continue
            layer_path = root / entry
            if not ctx.fs.is_dir(layer_path):
                continue
            if ctx.fs.is_file(layer_path / self.options.filename):
                self.report(
                    ctx,
                    location,
                    MessageId.FORBIDDEN,
                    layer=entry,
                    filename=self.options.filename,
                )


class NoUiInAppRule(StructureRule):
    """The composition layer holds no presentation segment."""

    rule_id = "no-ui-in-app"
    description = "Forbid a `ui` segment directly inside the app layer."
    options_model = SrcOnlyOptions
    messages = {
        MessageId.FORBIDDEN: 'Do not place "ui" segment inside the "app" layer.',
    }

    def audit(self, ctx: RuleContext, location: Location) -> None:
        app_path = Path(self.options.src) / APP_LAYER
        if not ctx.fs.is_dir(app_path):
            return
        listing = _entries(ctx.fs, app_path) or []
        if UI_SEGMENT in listing and ctx.fs.is_dir(app_path / UI_SEGMENT):
            self.report(ctx, location, MessageId.FORBIDDEN, layer=APP_LAYER, segment=UI_SEGMENT)


STRUCTURE_RULES: tuple[type[StructureRule], ...] = (
    FsdLayersRule,
    NoProcessesLayerRule,
    PublicApiRule,
    NoLayerPublicApiRule,
    NoUiInAppRule,
)
