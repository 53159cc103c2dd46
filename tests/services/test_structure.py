"""Tests for the whole-tree structural rules."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from fsdlint.domain.outcome import Fault
from fsdlint.domain.violations import Location, MessageId
from fsdlint.infrastructure.filesystem import FileSystem
from fsdlint.services.base import RuleContext, StructureRule, ViolationSink
from fsdlint.services.session import LintSession
from fsdlint.services.structure import (
    FsdLayersRule,
    NoLayerPublicApiRule,
    NoProcessesLayerRule,
    NoUiInAppRule,
    PublicApiRule,
)

HERE = Location(path="src/main.ts")


def _run(
    rule: StructureRule,
    root: Path,
    session: LintSession | None = None,
    fs: FileSystem | None = None,
) -> list[Any]:
    sink = ViolationSink()
    ctx = RuleContext(fs=fs or FileSystem(root), sink=sink, session=session or LintSession("t"))
    rule.run(ctx, HERE)
    return sink.violations


class _FaultyStat(FileSystem):
    def stat(self, path: str | Path) -> Any:
        return Fault(f"permission denied: {path}")


class TestFsdLayers:
    def test_conforming_tree(self, fsd_project: Path) -> None:
        assert _run(FsdLayersRule(), fsd_project) == []

    def test_missing_required(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree({"src": {"app": {}, "shared": {}}})
        violations = _run(FsdLayersRule({"required": ["app", "pages", "shared"]}), root)
        assert len(violations) == 1
        v = violations[0]
        assert v.message_id == MessageId.MISSING_REQUIRED
        assert v.data == {"name": "pages", "src": "src"}
        assert v.message == 'Required FSD layer "pages" is missing in src.'
        assert v.location == HERE

    def test_not_allowed_entry(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree({"src": {"app": {}, "processes": {}, "utils.ts": ""}})
        violations = _run(FsdLayersRule(), root)
        names = sorted(v.data["name"] for v in violations)
        assert names == ["processes", "utils.ts"]
        assert all(v.message_id == MessageId.NOT_ALLOWED for v in violations)
        assert "Allowed: app, pages, widgets, features, entities, shared, main.ts" in (
            violations[0].message
        )

    def test_empty_allowed_disables_check(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree({"src": {"anything": {}}})
        assert _run(FsdLayersRule({"allowed": []}), root) == []

    def test_ignored_entries(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree({"src": {"app": {}, "types.d.ts": "", ".DS_Store": ""}})
        rule = FsdLayersRule({"ignore": ["*.d.ts", ".*"]})
        assert _run(rule, root) == []

    def test_ignored_entry_cannot_satisfy_required(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree({"src": {"app": {}}})
        rule = FsdLayersRule({"required": ["app"], "ignore": ["app"]})
        [v] = _run(rule, root)
        assert v.message_id == MessageId.MISSING_REQUIRED

    def test_invalid_src_missing(self, tmp_path: Path) -> None:
        [v] = _run(FsdLayersRule(), tmp_path)
        assert v.message_id == MessageId.INVALID_SRC
        assert v.message == 'Source directory "src" does not exist or is not a directory.'

    def test_invalid_src_is_file(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree({"src": "not a dir"})
        [v] = _run(FsdLayersRule(), root)
        assert v.message_id == MessageId.INVALID_SRC

    def test_invalid_src_needs_some_expectation(self, tmp_path: Path) -> None:
        assert _run(FsdLayersRule({"allowed": [], "required": []}), tmp_path) == []

    def test_stat_fault_reports_nothing(self, tmp_path: Path) -> None:
        assert _run(FsdLayersRule(), tmp_path, fs=_FaultyStat(tmp_path)) == []

    def test_custom_src(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree({"frontend": {"src": {"app": {}, "legacy": {}}}})
        [v] = _run(FsdLayersRule({"src": "frontend/src"}), root)
        assert v.data["name"] == "legacy"
        assert v.data["src"] == "frontend/src"

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_broken_entry_skipped(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree({"src": {"app": {}}})
        os.symlink(root / "nowhere", root / "src" / "dangling")
        assert _run(FsdLayersRule(), root) == []

    def test_runs_once_per_session(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree({"src": {"legacy": {}}})
        session = LintSession("once")
        rule = FsdLayersRule()
        assert len(_run(rule, root, session)) == 1

        # Even after the tree changes, the rule does not run again.
        (root / "src" / "other").mkdir()
        assert _run(rule, root, session) == []
        assert _run(FsdLayersRule(), root, session) == []
        assert len(_run(rule, root, LintSession("fresh"))) == 2


class TestNoProcessesLayer:
    def test_reports_processes(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree({"src": {"app": {}, "processes": {}}})
        [v] = _run(NoProcessesLayerRule(), root)
        assert v.rule == "no-processes-layer"
        assert v.message_id == MessageId.FORBIDDEN
        assert v.message == "Do not use a `processes` folder inside src (deprecated layer)."

    def test_clean_and_missing_src(self, fsd_project: Path, tmp_path: Path) -> None:
        assert _run(NoProcessesLayerRule(), fsd_project) == []
        assert _run(NoProcessesLayerRule({"src": "absent"}), tmp_path) == []


class TestPublicApi:
    def test_conforming(self, fsd_project: Path) -> None:
        assert _run(PublicApiRule(), fsd_project) == []

    def test_missing_public_api(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree({"src": {"features": {"auth": {"ui": {"Form.vue": ""}}}}})
        [v] = _run(PublicApiRule(), root)
        assert v.message_id == MessageId.MISSING_PUBLIC_API
        assert v.data == {"slice": "auth", "layer": "features", "filename": "index.ts"}
        assert v.message == (
            'Slice "auth" in layer "features" is missing a public API file (index.ts).'
        )

    def test_duplicate_index(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree({"src": {"entities": {"user": {"index.ts": "", "index.js": ""}}}})
        [v] = _run(PublicApiRule(), root)
        assert v.message_id == MessageId.INVALID_PUBLIC_API
        assert v.data["file"] == "index.js"
        assert "Expected index.ts." in v.message

    def test_only_wrong_index(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree({"src": {"widgets": {"card": {"index.js": ""}}}})
        ids = sorted(v.message_id for v in _run(PublicApiRule(), root))
        assert ids == [MessageId.INVALID_PUBLIC_API, MessageId.MISSING_PUBLIC_API]

    def test_every_configured_layer_is_sliced(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree({"src": {"shared": {"ui": {}}, "pages": {"readme.md": ""}}})
        [v] = _run(PublicApiRule(), root)
        assert (v.data["layer"], v.data["slice"]) == ("shared", "ui")

    def test_unconfigured_layers_skipped(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree({"src": {"shared": {"ui": {}}, "app": {"store": {}}}})
        assert _run(PublicApiRule({"layers": ["pages", "features"]}), root) == []

    def test_custom_filename_and_ignore(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree(
            {"src": {"pages": {"home": {"index.js": ""}, "_draft": {}, "about": {}}}}
        )
        rule = PublicApiRule({"filename": "index.js", "ignore": ["_*"]})
        [v] = _run(rule, root)
        assert v.data["slice"] == "about"

    def test_missing_src_silent(self, tmp_path: Path) -> None:
        assert _run(PublicApiRule(), tmp_path) == []


class TestNoLayerPublicApi:
    def test_reports_layer_index(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree(
            {"src": {"features": {"index.ts": "", "auth": {"index.ts": ""}}, "main.ts": ""}}
        )
        [v] = _run(NoLayerPublicApiRule(), root)
        assert v.data == {"layer": "features", "filename": "index.ts"}
        assert v.message == (
            'Do not place a layer-level public API file "index.ts" inside layer "features".'
        )

    def test_ignore(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree({"src": {"shared": {"index.ts": ""}}})
        assert _run(NoLayerPublicApiRule({"ignore": ["shared"]}), root) == []

    def test_clean(self, fsd_project: Path) -> None:
        assert _run(NoLayerPublicApiRule(), fsd_project) == []


class TestNoUiInApp:
    def test_reports_ui_directory(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree({"src": {"app": {"ui": {"App.vue": ""}}}})
        [v] = _run(NoUiInAppRule(), root)
        assert v.data == {"layer": "app", "segment": "ui"}
        assert v.message == 'Do not place "ui" segment inside the "app" layer.'

    def test_ui_file_is_fine(self, make_tree: Callable[..., Path]) -> None:
        root = make_tree({"src": {"app": {"ui": "file, not a segment"}}})
        assert _run(NoUiInAppRule(), root) == []

    def test_no_app_layer(self, tmp_path: Path) -> None:
        assert _run(NoUiInAppRule(), tmp_path) == []
