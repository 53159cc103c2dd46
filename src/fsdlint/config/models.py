"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, fsdlint.toml only contains
overrides. Every rule validates its own ``[rules.<id>]`` table against
one of the ``*Options`` models below; unknown keys are rejected so a
misspelt option fails loudly instead of silently keeping its default.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from fsdlint.domain.layers import DEFAULT_LAYERS, SLICED_LAYERS

DEFAULT_SRC = "src"
DEFAULT_PUBLIC_API_FILENAME = "index.ts"
DEFAULT_ALLOWED_ROOT_ENTRIES: tuple[str, ...] = (*DEFAULT_LAYERS, "main.ts")


def _trim(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value]
    return value


# --- Rule options ---


class RuleOptions(BaseModel):
    """Base for per-rule option models: frozen, strict keys, trimmed strings."""

    model_config = {"frozen": True, "extra": "forbid"}

    src: str = DEFAULT_SRC

    @field_validator("*", mode="before")
    @classmethod
    def _trim_values(cls, value: Any) -> Any:
        return _trim(value)


class LayeredOptions(RuleOptions):
    """Options carrying an ordered layer list."""

    layers: list[str] = Field(default_factory=lambda: list(DEFAULT_LAYERS))
    ignore: list[str] = Field(default_factory=list)

    @field_validator("layers")
    @classmethod
    def _unique_layers(cls, value: list[str]) -> list[str]:
        if len(set(value)) != len(value):
            msg = f"layers must not contain duplicates: {value}"
            raise ValueError(msg)
        return value


class FsdLayersOptions(RuleOptions):
    """[rules.fsd-layers]"""

    required: list[str] = Field(default_factory=list)
    allowed: list[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_ROOT_ENTRIES))
    ignore: list[str] = Field(default_factory=list)


class SrcOnlyOptions(RuleOptions):
    """[rules.no-processes-layer] and [rules.no-ui-in-app]"""


class PublicApiOptions(LayeredOptions):
    """[rules.public-api]"""

    filename: str = DEFAULT_PUBLIC_API_FILENAME


class NoLayerPublicApiOptions(RuleOptions):
    """[rules.no-layer-public-api]"""

    filename: str = DEFAULT_PUBLIC_API_FILENAME
    ignore: list[str] = Field(default_factory=list)


class NoHigherLevelImportsOptions(LayeredOptions):
    """[rules.no-higher-level-imports]"""


class NoCrossSliceImportsOptions(LayeredOptions):
    """[rules.no-cross-slice-imports]"""

    layers: list[str] = Field(default_factory=lambda: list(SLICED_LAYERS))


# --- fsdlint.toml sections ---


class LintConfig(BaseModel):
    """[lint] section."""

    model_config = {"frozen": True, "extra": "forbid"}

    preset: Literal["recommended", "all"] = "recommended"
    select: list[str] = Field(default_factory=list)
    disable: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)

    @field_validator("select", "disable", "exclude", mode="before")
    @classmethod
    def _trim_values(cls, value: Any) -> Any:
        return _trim(value)
