"""Pluggy hook specifications for specreg load events.

Both hooks fire synchronously from the loader's load callbacks, once per
model, in load order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from specreg.domain.project import Project
    from specreg.domain.typekit import Typekit

PROJECT_NAME = "specreg"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class SpecregHookSpec:
    """Hook specifications for the specreg plugin system."""

    @hookspec
    def post_project_load(self, project: Project) -> None:
        """Called after a project is registered with the loader."""

    @hookspec
    def post_typekit_load(self, typekit: Typekit) -> None:
        """Called after a typekit is registered with the loader."""
