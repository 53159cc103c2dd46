"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) in the ``fsdlint.plugins`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from fsdlint.plugins.hookspecs import hookimpl
from fsdlint.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
