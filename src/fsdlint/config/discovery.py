"""Config file discovery and loading.

Walk-up finder locates fsdlint.toml, similar to how git finds .git/.
Supports FSDLINT_CONFIG env var and --config CLI flag overrides.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "fsdlint.toml"
CONFIG_ENV_VAR = "FSDLINT_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for fsdlint.toml.

    Returns the path to the config file, or None if not found.
    Checks FSDLINT_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def read_config(path: Path) -> dict[str, Any]:
    """Parse a config file into a plain dict (raises tomllib.TOMLDecodeError)."""
    return tomllib.loads(path.read_text(encoding="utf-8"))
