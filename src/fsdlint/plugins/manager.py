"""Plugin discovery, rule collection, and hook dispatch."""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any

import pluggy

from fsdlint.plugins.hookspecs import FsdlintHookSpec

if TYPE_CHECKING:
    from fsdlint.services.base import BaseRule

PROJECT_NAME = "fsdlint"
ENTRY_POINT_GROUP = "fsdlint.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(FsdlintHookSpec)
        self._loaded: bool = False

    def discover_and_load(self) -> list[str]:
        """Load plugins from the ``fsdlint.plugins`` entry point group.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        """Unregister a plugin instance."""
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def collect_rules(self) -> list[type[BaseRule]]:
        """Gather rule classes from every plugin's ``register_rules`` hook.

        A plugin that raises or returns something other than a list of
        rule classes is skipped with a warning.
        """
        from fsdlint.services.base import BaseRule

        rules: list[type[BaseRule]] = []
        for plugin in self._pm.get_plugins():
            plugin_name = self._pm.get_name(plugin) or plugin.__class__.__name__
            hook = getattr(plugin, "register_rules", None)
            if hook is None:
                continue
            try:
                contributed = hook()
            except Exception:
                logger.warning("Failed to collect rules from plugin %s", plugin_name, exc_info=True)
                continue
            if contributed is None:
                continue
            if not isinstance(contributed, (list, tuple)):
                logger.warning("Plugin %s returned non-list rule registrations", plugin_name)
                continue
            for rule_cls in contributed:
                if inspect.isclass(rule_cls) and issubclass(rule_cls, BaseRule):
                    rules.append(rule_cls)
                else:
                    logger.warning("Skipping non-rule %r from plugin %s", rule_cls, plugin_name)
        return rules

    def notify(self, hook_name: str, payload: dict[str, Any], warnings: list[str]) -> None:
        """Call *hook_name* on every plugin.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        try:
            getattr(self._pm.hook, hook_name)(**payload)
        except Exception:
            logger.warning("Plugin hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue
            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)
