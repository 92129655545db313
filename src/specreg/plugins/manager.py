"""Plugin discovery, loading, and dispatch of loader events.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
group ``specreg.plugins``.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any

import pluggy

from specreg.plugins.hookspecs import PROJECT_NAME, SpecregHookSpec

if TYPE_CHECKING:
    from specreg.domain.project import Project
    from specreg.domain.typekit import Typekit
    from specreg.loaders.loader import Loader

ENTRY_POINT_GROUP = "specreg.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(SpecregHookSpec)
        self._loaded: bool = False

    def discover_and_load(self) -> list[str]:
        """Discover plugins registered under the ``specreg.plugins`` entry point group.

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

    @property
    def hook(self) -> pluggy.HookRelay:
        """Access the hook relay for dispatching events."""
        return self._pm.hook

    def get_plugins(self) -> list[object]:
        """Return all registered plugins."""
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Loader events
    # ------------------------------------------------------------------

    def attach(self, loader: Loader) -> None:
        """Forward *loader*'s load events to the plugin hooks.

        Models the loader already holds are replayed first, in load order.
        """
        loader.on_typekit_load(self._on_typekit_load)
        loader.on_project_load(self._on_project_load)

    def _on_project_load(self, project: Project) -> None:
        self._call("post_project_load", project=project)

    def _on_typekit_load(self, typekit: Typekit) -> None:
        self._call("post_typekit_load", typekit=typekit)

    def _call(self, hook_name: str, **kwargs: Any) -> None:
        """Dispatch *hook_name*, logging plugin failures instead of raising."""
        try:
            getattr(self._pm.hook, hook_name)(**kwargs)
        except Exception:
            logger.warning("Plugin hook %s failed", hook_name, exc_info=True)

    # ------------------------------------------------------------------
    # Entry-point helpers
    # ------------------------------------------------------------------

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            if not self._has_hook_impls(plugin):
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

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Check whether *cls* has any methods decorated with ``@hookimpl``.

        Pluggy's ``HookimplMarker("specreg")`` sets a ``specreg_impl``
        attribute on decorated methods.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, "specreg_impl", None):
                return True
        return False
