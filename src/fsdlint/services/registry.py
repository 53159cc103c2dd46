"""Rule registry, presets, and the rule catalogue service."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any

from fsdlint.services.base import BaseRule
from fsdlint.services.boundaries import IMPORT_RULES
from fsdlint.services.result import ServiceResult
from fsdlint.services.structure import STRUCTURE_RULES, NoUiInAppRule

if TYPE_CHECKING:
    from fsdlint.config.models import LintConfig
    from fsdlint.config.settings import FsdSettings
    from fsdlint.plugins.manager import PluginManager

BUILTIN_RULES: tuple[type[BaseRule], ...] = (*STRUCTURE_RULES, *IMPORT_RULES)

PRESET_RECOMMENDED = "recommended"
PRESET_ALL = "all"
PRESETS = (PRESET_RECOMMENDED, PRESET_ALL)

# Rules left out of the recommended preset.
_NOT_RECOMMENDED = frozenset({NoUiInAppRule.rule_id})


class UnknownRuleError(ValueError):
    """A configured rule id does not name any registered rule."""

    def __init__(self, rule_ids: Iterable[str], where: str) -> None:
        self.rule_ids = sorted(rule_ids)
        super().__init__(f"Unknown rule(s) in {where}: {', '.join(self.rule_ids)}")


class RuleRegistry:
    """Maps rule ids to rule classes, in registration order.

    Built-in rules are registered first; plugin rules follow and are
    part of both presets.
    """

    def __init__(self, rules: Iterable[type[BaseRule]] = BUILTIN_RULES) -> None:
        self._rules: dict[str, type[BaseRule]] = {}
        for rule_cls in rules:
            self.register(rule_cls)

    @classmethod
    def with_plugins(cls, plugins: PluginManager | None) -> RuleRegistry:
        registry = cls()
        if plugins is not None:
            for rule_cls in plugins.collect_rules():
                registry.register(rule_cls)
        return registry

    def register(self, rule_cls: type[BaseRule]) -> None:
        if rule_cls.rule_id in self._rules:
            msg = f"Rule {rule_cls.rule_id!r} is already registered"
            raise ValueError(msg)
        self._rules[rule_cls.rule_id] = rule_cls

    def get(self, rule_id: str) -> type[BaseRule]:
        try:
            return self._rules[rule_id]
        except KeyError:
            raise UnknownRuleError([rule_id], "registry") from None

    def ids(self) -> list[str]:
        return list(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def __iter__(self) -> Iterator[type[BaseRule]]:
        return iter(self._rules.values())

    def preset_ids(self, preset: str) -> list[str]:
        if preset not in PRESETS:
            msg = f"Unknown preset {preset!r}; expected one of {', '.join(PRESETS)}"
            raise ValueError(msg)
        if preset == PRESET_ALL:
            return self.ids()
        return [rule_id for rule_id in self._rules if rule_id not in _NOT_RECOMMENDED]

    def enabled_ids(self, lint: LintConfig) -> list[str]:
        """Resolve ``select`` (or the preset) minus ``disable``."""
        unknown = {r for r in (*lint.select, *lint.disable) if r not in self._rules}
        if unknown:
            raise UnknownRuleError(unknown, "[lint] select/disable")
        base = list(lint.select) if lint.select else self.preset_ids(lint.preset)
        return [rule_id for rule_id in base if rule_id not in lint.disable]

    def build(
        self,
        lint: LintConfig,
        rule_options: Mapping[str, Mapping[str, Any]] | None = None,
        *,
        src: str | None = None,
    ) -> list[BaseRule]:
        """Instantiate every enabled rule with its validated options.

        *src* overrides the ``src`` option of every rule. Raises
        UnknownRuleError or pydantic.ValidationError on bad config.
        """
        rule_options = rule_options or {}
        unknown = set(rule_options) - set(self._rules)
        if unknown:
            raise UnknownRuleError(unknown, "[rules]")
        rules: list[BaseRule] = []
        for rule_id in self.enabled_ids(lint):
            raw = dict(rule_options.get(rule_id, {}))
            if src is not None:
                raw["src"] = src
            rules.append(self._rules[rule_id](raw))
        return rules


class RuleCatalogService:
    """Lists known rules and whether the current configuration enables them."""

    def __init__(self, settings: FsdSettings, registry: RuleRegistry | None = None) -> None:
        self._settings = settings
        self._registry = registry or RuleRegistry()

    def list_rules(self, *, preset: str | None = None) -> ServiceResult:
        lint = self._settings.lint
        if preset is not None:
            lint = lint.model_copy(update={"preset": preset, "select": []})
        try:
            enabled = set(self._registry.enabled_ids(lint))
        except (UnknownRuleError, ValueError) as exc:
            return ServiceResult.failure("rules", "INVALID_CONFIG", str(exc))

        memberships = {name: set(self._registry.preset_ids(name)) for name in PRESETS}
        items = [
            {
                "id": rule_cls.rule_id,
                "kind": rule_cls.kind.value,
                "description": rule_cls.description,
                "enabled": rule_cls.rule_id in enabled,
                "presets": [name for name in PRESETS if rule_cls.rule_id in memberships[name]],
            }
            for rule_cls in self._registry
        ]
        return ServiceResult(
            ok=True,
            op="rules",
            data={"items": items, "count": len(items), "preset": lint.preset},
        )
