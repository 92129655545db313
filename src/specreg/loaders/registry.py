"""ModelRegistry — the append-only store behind a loader.

Holds the loaded projects, typekits, and task models, the merged type
registry, the interface typelist, and the type-name -> typekits index,
together with the project and typekit load callbacks.

Only the loader calls the ``register_*`` methods. Everything else reads.

INVARIANT: Nothing is ever evicted. Type names and interface types only
accumulate for the lifetime of the registry.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING

from specreg.domain.errors import TaskModelConflict
from specreg.domain.types import TypeRegistry
from specreg.loaders.callbacks import CallbackList

if TYPE_CHECKING:
    from specreg.domain.project import Project, TaskModel
    from specreg.domain.typekit import Typekit
    from specreg.domain.types import TypeModel

logger = logging.getLogger(__name__)


class TaskCollisionPolicy(StrEnum):
    """What to do when two different task models share a name."""

    OVERWRITE = "overwrite"
    WARN = "warn"
    KEEP_FIRST = "keep_first"
    ERROR = "error"


class ModelRegistry:
    """Caches of everything a loader has registered."""

    def __init__(
        self,
        *,
        task_collision: TaskCollisionPolicy | str = TaskCollisionPolicy.OVERWRITE,
    ) -> None:
        self.loaded_projects: dict[str, Project] = {}
        self.loaded_typekits: dict[str, Typekit] = {}
        self.loaded_task_models: dict[str, TaskModel] = {}
        self.registry = TypeRegistry()
        self.interface_typelist: set[str] = set()
        self.typekits_by_type_name: dict[str, list[Typekit]] = {}
        self.project_callbacks = CallbackList()
        self.typekit_callbacks = CallbackList()
        self.task_collision = TaskCollisionPolicy(task_collision)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_project(self, project: Project) -> None:
        """Record *project* and its task models, then notify observers."""
        tasks = project.tasks
        if self.task_collision == TaskCollisionPolicy.ERROR:
            for name, model in tasks.items():
                existing = self.loaded_task_models.get(name)
                if existing is not None and existing is not model:
                    raise TaskModelConflict(name, existing.project.name, model.project.name)
        for name, model in tasks.items():
            self._register_task_model(name, model)
        self.loaded_projects[project.name] = project
        self.project_callbacks.dispatch(project)

    def register_typekit(self, typekit: Typekit) -> None:
        """Merge *typekit* into the shared type state, then notify observers.

        The type merge runs first: on ``TypeConflict`` no other cache is touched.
        """
        self.registry.merge(typekit.registry)
        self.interface_typelist |= typekit.interface_typelist
        for type_name in typekit.typelist:
            declaring = self.typekits_by_type_name.setdefault(type_name, [])
            if not any(tk is typekit for tk in declaring):
                declaring.append(typekit)
        self.loaded_typekits[typekit.name] = typekit
        self.typekit_callbacks.dispatch(typekit)

    def register_type_model(
        self,
        type_model: TypeModel,
        *,
        source: TypeRegistry | None = None,
        interface: bool = True,
    ) -> None:
        """Register a single type outside of any typekit.

        With *source*, the type and its transitive dependencies are copied
        from it. Without, only *type_model* is added and its dependencies
        must already be known. Ad-hoc types never enter
        ``typekits_by_type_name``.
        """
        if source is not None:
            self.registry.merge(source.minimal(type_model.name))
        else:
            for dep in type_model.dependencies():
                self.registry.get(dep)
            self.registry.add(type_model)
        if interface:
            self.interface_typelist.add(type_model.name)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _register_task_model(self, name: str, model: TaskModel) -> None:
        existing = self.loaded_task_models.get(name)
        if existing is None or existing is model:
            self.loaded_task_models[name] = model
            return

        policy = self.task_collision
        if policy == TaskCollisionPolicy.KEEP_FIRST:
            logger.debug("Keeping task model %s from %s", name, existing.project.name)
            return
        if policy == TaskCollisionPolicy.WARN:
            logger.warning(
                "Task model %s from %s replaces the one from %s",
                name,
                model.project.name,
                existing.project.name,
            )
        self.loaded_task_models[name] = model
