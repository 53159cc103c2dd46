"""Violation payloads and message identifiers.

Violations are the product of the engine, not errors: they are
reported through a sink and never raised.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class MessageId(StrEnum):
    """Fixed violation kinds shared by all rules."""

    INVALID_SRC = "invalid_src"
    MISSING_REQUIRED = "missing_required"
    NOT_ALLOWED = "not_allowed"
    FORBIDDEN = "forbidden"
    MISSING_PUBLIC_API = "missing_public_api"
    INVALID_PUBLIC_API = "invalid_public_api"


class RuleKind(StrEnum):
    """How a rule is driven by the host."""

    STRUCTURE = "structure"
    IMPORTS = "imports"


class Location(BaseModel):
    """Where a violation is attached: a file and an optional line."""

    model_config = {"frozen": True}

    path: str
    line: int | None = None

    def __str__(self) -> str:
        return f"{self.path}:{self.line}" if self.line is not None else self.path


class Violation(BaseModel):
    """A single reported rule violation."""

    model_config = {"frozen": True}

    rule: str
    message_id: MessageId
    message: str
    location: Location
    data: dict[str, Any] = Field(default_factory=dict)


def render_message(template: str, data: dict[str, Any]) -> str:
    """Fill ``{name}`` placeholders in *template* from *data*.

    Unknown placeholders are left as-is rather than raising.
    """

    class _Defaulting(dict[str, Any]):
        def __missing__(self, key: str) -> str:
            return "{" + key + "}"

    return template.format_map(_Defaulting(data))
