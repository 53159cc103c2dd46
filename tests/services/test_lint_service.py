"""Tests for LintService orchestration."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

from fsdlint.config.models import LintConfig
from fsdlint.config.settings import FsdSettings
from fsdlint.infrastructure.imports import ImportRef
from fsdlint.plugins.hookspecs import hookimpl
from fsdlint.plugins.manager import PluginManager
from fsdlint.services.lint import LintService
from fsdlint.services.session import LintSession, get_session

SettingsFactory = Callable[..., FsdSettings]

HIGHER_ONLY = LintConfig(select=["no-higher-level-imports"])


def _service(root: Path, settings_for: SettingsFactory, **kwargs: Any) -> LintService:
    service_kwargs = {k: kwargs.pop(k) for k in ("plugins", "src") if k in kwargs}
    return LintService(
        settings_for(root, **kwargs), session=LintSession("lint-test"), **service_kwargs
    )


class TestLintPaths:
    def test_clean_project(self, fsd_project: Path, settings_for: SettingsFactory) -> None:
        result = _service(fsd_project, settings_for).lint_paths()
        assert result.ok
        assert result.op == "lint"
        assert result.data["clean"] is True
        assert result.data["count"] == 0
        assert result.data["files_checked"] == 7
        assert result.meta is not None
        assert result.meta["session_id"] == "lint-test"
        assert "no-ui-in-app" not in result.meta["rules"]

    def test_reports_import_violations(
        self, fsd_project: Path, settings_for: SettingsFactory
    ) -> None:
        (fsd_project / "src/features/login/model.ts").write_text(
            "import { Header } from 'widgets/header'\n"
            "import { cart } from 'features/cart'\n"
            "const page = () => import('pages/home')\n",
            encoding="utf-8",
        )
        result = _service(fsd_project, settings_for).lint_paths()
        assert result.data["clean"] is False
        found = {
            (v["rule"], v["location"]["path"], v["location"]["line"])
            for v in result.data["violations"]
        }
        assert found == {
            ("no-higher-level-imports", "src/features/login/model.ts", 1),
            ("no-cross-slice-imports", "src/features/login/model.ts", 2),
            ("no-higher-level-imports", "src/features/login/model.ts", 3),
        }

    def test_structural_rules_report_once(
        self, fsd_project: Path, settings_for: SettingsFactory
    ) -> None:
        (fsd_project / "src/processes").mkdir()
        result = _service(fsd_project, settings_for).lint_paths()
        rules = sorted(v["rule"] for v in result.data["violations"])
        assert rules == ["fsd-layers", "no-processes-layer"]
        assert result.data["files_checked"] == 7
        ran = result.meta["structure_rules_run"]
        assert {"fsd-layers", "no-processes-layer"} <= set(ran)
        assert "no-cross-slice-imports" not in ran
        assert ran == sorted(ran)

    def test_second_run_in_same_session_skips_structure(
        self, fsd_project: Path, settings_for: SettingsFactory
    ) -> None:
        (fsd_project / "src/processes").mkdir()
        service = _service(fsd_project, settings_for)
        assert service.lint_paths().data["count"] == 2
        second = service.lint_paths()
        assert second.data["count"] == 0
        assert second.meta["structure_rules_run"] == sorted(service.session.executed)
        assert "fsd-layers" in service.session.executed

    def test_default_session_is_process_wide(
        self, fsd_project: Path, settings_for: SettingsFactory
    ) -> None:
        service = LintService(settings_for(fsd_project))
        service.lint_paths()
        assert service.session is get_session()
        assert get_session().has_run("public-api")

    def test_subset_of_paths(self, fsd_project: Path, settings_for: SettingsFactory) -> None:
        result = _service(fsd_project, settings_for).lint_paths(["src/entities"])
        assert result.data["files_checked"] == 1

    def test_exclude(self, fsd_project: Path, settings_for: SettingsFactory) -> None:
        (fsd_project / "src/shared/api/bad.ts").write_text("import 'app/store'\n", encoding="utf-8")
        lint = LintConfig(exclude=["src/shared/**"])
        result = _service(fsd_project, settings_for, lint=lint).lint_paths()
        assert result.data["clean"] is True
        assert result.data["files_checked"] == 6

    def test_src_override(self, tmp_path: Path, settings_for: SettingsFactory) -> None:
        (tmp_path / "client/shared/lib").mkdir(parents=True)
        (tmp_path / "client/shared/lib/a.ts").write_text("import 'app/x'\n", encoding="utf-8")
        lint = LintConfig(select=["no-higher-level-imports"])
        result = _service(tmp_path, settings_for, lint=lint, src="client").lint_paths()
        [v] = result.data["violations"]
        assert v["location"] == {"path": "client/shared/lib/a.ts", "line": 1}

    def test_no_files(self, tmp_path: Path, settings_for: SettingsFactory) -> None:
        result = _service(tmp_path, settings_for).lint_paths()
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NO_FILES"

    def test_unknown_rule_is_invalid_config(
        self, fsd_project: Path, settings_for: SettingsFactory
    ) -> None:
        result = _service(fsd_project, settings_for, rules={"ghost": {}}).lint_paths()
        assert result.error is not None
        assert result.error.code == "INVALID_CONFIG"
        assert "ghost" in result.error.message

    def test_bad_rule_option_is_invalid_config(
        self, fsd_project: Path, settings_for: SettingsFactory
    ) -> None:
        rules = {"no-higher-level-imports": {"layers": ["app", "app"]}}
        result = _service(fsd_project, settings_for, rules=rules).lint_paths()
        assert result.error is not None
        assert result.error.code == "INVALID_CONFIG"

    def test_unreadable_file_warns(self, fsd_project: Path, settings_for: SettingsFactory) -> None:
        (fsd_project / "src/shared/api/blob.ts").write_bytes(b"\xff\xfe\x00import")
        result = _service(fsd_project, settings_for).lint_paths()
        assert result.ok
        assert result.warnings == ["Could not read src/shared/api/blob.ts"]
        assert result.data["files_checked"] == 8


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[int, int]] = []

    @hookimpl
    def post_lint(self, violations_found: int, files_checked: int) -> None:
        self.calls.append((violations_found, files_checked))


class _Broken:
    @hookimpl
    def post_lint(self, violations_found: int, files_checked: int) -> None:
        raise RuntimeError("plugin crashed")


class TestPostLintHook:
    def test_hook_receives_counts(self, fsd_project: Path, settings_for: SettingsFactory) -> None:
        plugins = PluginManager()
        recorder = _Recorder()
        plugins.register_plugin(recorder)
        result = _service(fsd_project, settings_for, plugins=plugins).lint_paths()
        assert result.ok
        assert recorder.calls == [(0, 7)]

    def test_hook_failure_is_warning(
        self, fsd_project: Path, settings_for: SettingsFactory
    ) -> None:
        plugins = PluginManager()
        plugins.register_plugin(_Broken())
        result = _service(fsd_project, settings_for, plugins=plugins).lint_paths()
        assert result.ok
        assert result.warnings == ["Plugin hook post_lint failed"]


class TestLintSource:
    def test_accepts_tuples_and_refs(self, tmp_path: Path, settings_for: SettingsFactory) -> None:
        lint = LintConfig(select=["no-higher-level-imports", "no-cross-slice-imports"])
        service = _service(tmp_path, settings_for, lint=lint)
        violations = service.lint_source(
            "src/entities/user/model.ts",
            [("features/auth", 3), ImportRef("entities/post", 9), ("shared/api", 10)],
        )
        assert [(v.rule, v.location.line) for v in violations] == [
            ("no-higher-level-imports", 3),
            ("no-cross-slice-imports", 9),
        ]

    def test_returns_only_new_violations(
        self, tmp_path: Path, settings_for: SettingsFactory
    ) -> None:
        service = _service(tmp_path, settings_for, lint=HIGHER_ONLY)
        first = service.lint_source("src/shared/a.ts", [("app/x", 1)])
        second = service.lint_source("src/shared/b.ts", [("pages/y", 1)])
        assert [v.location.path for v in first] == ["src/shared/a.ts"]
        assert [v.location.path for v in second] == ["src/shared/b.ts"]

    def test_lint_file_with_source(self, tmp_path: Path, settings_for: SettingsFactory) -> None:
        service = _service(tmp_path, settings_for, lint=HIGHER_ONLY)
        violations = service.lint_file("src/shared/a.ts", source="\n\nimport 'widgets/w'\n")
        assert [(v.location.path, v.location.line) for v in violations] == [("src/shared/a.ts", 3)]
