"""Shared pytest fixtures and tree builders for fsdlint tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from fsdlint.config.settings import FsdSettings
from fsdlint.services.session import LintSession, reset_sessions

Tree = dict[str, Any]


def build_tree(root: Path, tree: Tree) -> Path:
    """Materialise a nested dict as files and directories under *root*.

    Dict values become directories; string values become file contents.
    """
    root.mkdir(parents=True, exist_ok=True)
    for name, value in tree.items():
        target = root / name
        if isinstance(value, dict):
            build_tree(target, value)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(value, encoding="utf-8")
    return root


@pytest.fixture(autouse=True)
def _fresh_sessions() -> Iterator[None]:
    """Every test starts with an empty process-wide session registry."""
    reset_sessions()
    yield
    reset_sessions()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[Tree], Path]:
    """Return a builder writing a tree under ``tmp_path``."""

    def _make(tree: Tree) -> Path:
        return build_tree(tmp_path, tree)

    return _make


@pytest.fixture
def session() -> LintSession:
    return LintSession("test-session")


@pytest.fixture
def fsd_project(tmp_path: Path) -> Path:
    """A conforming feature-sliced project with one violation-free file per layer."""
    build_tree(
        tmp_path,
        {
            "src": {
                "main.ts": "import { app } from 'app/providers'\n",
                "app": {"providers": {"index.ts": "import { HomePage } from 'pages/home'\n"}},
                "pages": {"home": {"index.ts": "import { Header } from 'widgets/header'\n"}},
                "widgets": {"header": {"index.ts": "import { Login } from 'features/login'\n"}},
                "features": {"login": {"index.ts": "import { User } from 'entities/user'\n"}},
                "entities": {"user": {"index.ts": "import { api } from 'shared/api'\n"}},
                "shared": {"api": {"index.ts": "export const api = {}\n"}},
            }
        },
    )
    return tmp_path


@pytest.fixture
def settings_for() -> Callable[..., FsdSettings]:
    """Build settings rooted at a project directory, ignoring any ambient config."""

    def _settings(root: Path, **kwargs: Any) -> FsdSettings:
        return FsdSettings(project_root=root, **kwargs)

    return _settings


@pytest.fixture
def _isolated_project(fsd_project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp project so the CLI lints it.

    Use via ``@pytest.mark.usefixtures("_isolated_project")``.
    """
    monkeypatch.delenv("FSDLINT_CONFIG", raising=False)
    monkeypatch.chdir(fsd_project)
