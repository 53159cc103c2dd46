"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer entry points return ServiceResult.
Lint violations travel inside ``data``; ``ok=False`` is reserved for
runs that could not be carried out at all (bad config, nothing to lint).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation could be carried out.
        op: Name of the operation (``"lint"``, ``"rules"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues (unreadable files, plugin failures).
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (session id, enabled rules, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        """Shorthand for an ``ok=False`` result."""
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))
