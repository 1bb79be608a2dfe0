"""Parser plugin discovery and loading.

Discovery: entry points in the ``envbind.parsers`` group, loaded through
pluggy's setuptools entry-point support, plus plugins registered directly.

INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import inspect
import logging

import pluggy

from envbind.parsers.base import ValueParser
from envbind.parsers.registry import ParserRegistry
from envbind.plugins.hookspecs import PROJECT_NAME, EnvBindHookSpec

ENTRY_POINT_GROUP = "envbind.parsers"

logger = logging.getLogger(__name__)


class PluginManager:
    """Collects plugin-provided parsers and applies them to a registry."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(EnvBindHookSpec)
        self._loaded: bool = False

    def discover_and_load(self) -> list[str]:
        """Load every plugin published under the ``envbind.parsers`` group.

        Returns a list of loaded plugin names.
        """
        try:
            self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        except Exception:
            logger.warning("Failed to load envbind parser plugins", exc_info=True)
        self._normalize_plugin_instances()
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def collect_parsers(self) -> list[ValueParser]:
        """Gather parsers from every plugin; invalid contributions are skipped."""
        parsers: list[ValueParser] = []
        try:
            results = self._pm.hook.envbind_value_parsers()
        except Exception:
            logger.warning("A parser plugin raised while providing parsers", exc_info=True)
            return parsers

        # pluggy calls the most recently registered plugin first
        for contributed in reversed(results):
            for parser in contributed or ():
                if not isinstance(parser, ValueParser):
                    logger.warning("Ignoring non-parser plugin contribution: %r", parser)
                    continue
                parsers.append(parser)
        return parsers

    def apply(self, registry: ParserRegistry) -> int:
        """Register every plugin parser into *registry*; returns how many were new."""
        added = registry.register_many(self.collect_parsers())
        logger.debug("Applied %d plugin parser(s)", added)
        return added

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
