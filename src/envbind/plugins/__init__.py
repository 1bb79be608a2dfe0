"""Extension layer: parser plugins via pluggy.

Discovery: entry_points (pip-installed) in the ``envbind.parsers`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from envbind.plugins.hookspecs import hookimpl
from envbind.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
