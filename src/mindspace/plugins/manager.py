"""PluginManager — thin wrapper around a pluggy manager for mindspace hooks.

Third-party plugins are installed packages that advertise an object under
the ``mindspace.plugins`` entry-point group. The built-in autosave plugin is
registered directly by the workspace.
"""

from __future__ import annotations

import inspect
import logging

import pluggy

from mindspace.plugins.hookspecs import MindspaceHookSpec

PROJECT_NAME = "mindspace"
ENTRY_POINT_GROUP = "mindspace.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Registry of hook implementations for graph and persistence events."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(MindspaceHookSpec)
        self._loaded = False

    @property
    def hook(self) -> pluggy.HookRelay:
        """Dispatch relay: ``manager.hook.post_save(...)``."""
        return self._pm.hook

    @property
    def is_loaded(self) -> bool:
        """True once installed plugins have been looked up."""
        return self._loaded

    def discover_and_load(self) -> list[str]:
        """Register every installed plugin and return all plugin names.

        An entry point may name a class instead of an instance; such classes
        are instantiated without arguments. A class that fails to construct
        is skipped with a warning.
        """
        count = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        for plugin in list(self._pm.get_plugins()):
            if inspect.isclass(plugin):
                self._instantiate(plugin)
        self._loaded = True
        names = self.list_plugin_names()
        logger.debug("Loaded %d installed plugin(s): %s", count, ", ".join(names))
        return names

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register *plugin* under *name* (its class name by default)."""
        plugin_name = name or type(plugin).__name__
        self._pm.register(plugin, name=plugin_name)
        logger.debug("Registered plugin: %s", plugin_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or type(p).__name__ for p in self._pm.get_plugins()]

    def _instantiate(self, plugin_cls: type) -> None:
        plugin_name = self._pm.get_name(plugin_cls) or plugin_cls.__name__
        self._pm.unregister(plugin_cls)
        try:
            instance = plugin_cls()
        except Exception:
            logger.warning("Cannot instantiate plugin %s", plugin_name, exc_info=True)
            return
        self._pm.register(instance, name=plugin_name)
