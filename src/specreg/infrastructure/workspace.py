"""Workspace — the composition root shared by every service.

A Workspace is built once per CLI invocation from :class:`SpecregSettings`
and stored on the click context. It owns the files backend, the root
loader, and (when enabled) the plugin manager attached to that loader.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from specreg.infrastructure.files import FilesBackend
from specreg.loaders.loader import Loader

if TYPE_CHECKING:
    from pathlib import Path

    from specreg.config.settings import SpecregSettings
    from specreg.loaders.backend import Backend
    from specreg.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class Workspace:
    """Backend, loader, and plugins wired together from settings.

    Parameters:
        settings: Resolved settings for this invocation.
        backend: Overrides the files backend built from the search paths.
    """

    def __init__(self, settings: SpecregSettings, *, backend: Backend | None = None) -> None:
        self._settings = settings
        self._backend = backend if backend is not None else FilesBackend(settings.search_paths())
        self._loader = Loader(
            self._backend,
            define_dummy_types=settings.effective_dummy_types,
            task_collision=settings.loader.task_collision,
        )
        self._plugins: PluginManager | None = None
        if settings.plugins.enabled:
            self.init_plugins()
        for name in settings.loader.default_typekits:
            self._loader.add_default_typekit(name)

    @property
    def settings(self) -> SpecregSettings:
        """The resolved settings for this workspace."""
        return self._settings

    @property
    def backend(self) -> Backend:
        return self._backend

    @property
    def loader(self) -> Loader:
        """The root loader every model resolves through."""
        return self._loader

    @property
    def plugins(self) -> PluginManager | None:
        """The plugin manager (None if plugins are disabled)."""
        return self._plugins

    @property
    def search_paths(self) -> list[Path]:
        return self._settings.search_paths()

    def init_plugins(self) -> PluginManager:
        """Discover entry-point plugins and forward loader events to them."""
        from specreg.plugins.manager import PluginManager

        pm = PluginManager()
        names = pm.discover_and_load()
        if names:
            logger.debug("Loaded plugins: %s", ", ".join(names))
        pm.attach(self._loader)
        self._plugins = pm
        return pm

    def available_projects(self) -> list[str]:
        return self._backend.available_projects()
