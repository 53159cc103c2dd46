"""Filesystem capability and source-file discovery.

INVARIANT: no filesystem failure escapes this module. Every call
returns a tagged outcome; callers decide whether a Missing or Fault
skips one entry or a whole sub-check.
"""

from __future__ import annotations

import os
import stat as _stat
from dataclasses import dataclass
from pathlib import Path

from fsdlint.domain.outcome import Fault, Missing, Ok
from fsdlint.infrastructure.patterns import is_ignored

# Extensions the host treats as lintable sources.
SOURCE_EXTENSIONS: frozenset[str] = frozenset(
    {".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".mts", ".cts", ".vue"}
)

# Directories never descended into during discovery.
_SKIP_DIRS = frozenset({"node_modules", ".git", "dist", "build", "coverage", ".nuxt", ".output"})


@dataclass(frozen=True)
class EntryStat:
    """Kind of a filesystem entry."""

    is_dir: bool
    is_file: bool


class FileSystem:
    """Read-only filesystem access relative to a project root.

    Relative paths are resolved against *root*; absolute paths are used
    as-is.
    """

    def __init__(self, root: Path | None = None) -> None:
        self.root = root or Path.cwd()

    def resolve(self, path: str | Path) -> Path:
        p = Path(path)
        return p if p.is_absolute() else self.root / p

    def exists(self, path: str | Path) -> Ok[bool] | Fault:
        target = self.resolve(path)
        try:
            target.stat()
        except FileNotFoundError:
            return Ok(False)
        except OSError as exc:
            return Fault(f"exists {target}: {exc}")
        return Ok(True)

    def stat(self, path: str | Path) -> Ok[EntryStat] | Missing | Fault:
        target = self.resolve(path)
        try:
            st = target.stat()
        except FileNotFoundError:
            return Missing(str(path))
        except OSError as exc:
            return Fault(f"stat {target}: {exc}")
        return Ok(EntryStat(is_dir=_stat.S_ISDIR(st.st_mode), is_file=_stat.S_ISREG(st.st_mode)))

    def list_entries(self, path: str | Path) -> Ok[list[str]] | Missing | Fault:
        """Names of the immediate entries of *path*, sorted."""
        target = self.resolve(path)
        try:
            return Ok(sorted(os.listdir(target)))
        except FileNotFoundError:
            return Missing(str(path))
        except OSError as exc:
            return Fault(f"list {target}: {exc}")

    def read_text(self, path: str | Path) -> Ok[str] | Missing | Fault:
        target = self.resolve(path)
        try:
            return Ok(target.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return Missing(str(path))
        except (OSError, UnicodeDecodeError) as exc:
            return Fault(f"read {target}: {exc}")

    def is_dir(self, path: str | Path) -> bool:
        outcome = self.stat(path)
        return isinstance(outcome, Ok) and outcome.value.is_dir

    def is_file(self, path: str | Path) -> bool:
        outcome = self.stat(path)
        return isinstance(outcome, Ok) and outcome.value.is_file


def relative_posix(path: Path, root: Path) -> str:
    """Render *path* relative to *root* with forward slashes when possible."""
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def find_source_files(
    root: Path,
    targets: list[Path] | None = None,
    *,
    exclude: list[str] | None = None,
    extensions: frozenset[str] = SOURCE_EXTENSIONS,
) -> list[Path]:
    """Discover lintable source files under *targets* (default: *root*).

    Skips ``node_modules``, ``.git``, build output, and any file whose
    root-relative path matches an *exclude* glob.
    """
    search = targets or [root]
    results: set[Path] = set()
    for target in search:
        base = target if target.is_absolute() else root / target
        if base.is_file():
            candidates = [base]
        elif base.is_dir():
            candidates = [p for p in base.rglob("*") if p.is_file()]
        else:
            continue
        for path in candidates:
            if path.suffix not in extensions:
                continue
            if any(part in _SKIP_DIRS for part in path.relative_to(base).parts):
                continue
            if is_ignored(relative_posix(path, root), exclude):
                continue
            results.add(path)
    return sorted(results)
