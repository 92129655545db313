"""Loader — lazy, caching access to projects, typekits, tasks, and deployments.

Name-based queries check the registry first. On a miss the loader asks its
:class:`~specreg.loaders.backend.Backend` for source text, hands it to a
builder, and registers the result, which fires the load callbacks.

Every model the loader builds is bound to its *root loader* (the loader
itself unless another one is passed in). Cross-project lookups made while
building therefore go through the root loader, which lets many loaders
share one global universe of task libraries and typekits.

Log records emitted while a load is in flight carry the chain of nested
loads (see :func:`specreg.config.logging.load_context`).

Single-threaded. No locking, retries, or timeouts.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from specreg.config.logging import load_context
from specreg.domain.errors import AmbiguousName, InternalError, LoadCycleError, NotFound
from specreg.domain.lifecycle import (
    LOAD_TRANSITIONS,
    LoadState,
    is_in_flight,
    is_valid_transition,
)
from specreg.domain.project import Project
from specreg.domain.typekit import Typekit
from specreg.loaders.registry import ModelRegistry, TaskCollisionPolicy
from specreg.loaders.resolver import TypeResolver

if TYPE_CHECKING:
    from specreg.domain.project import DeployedTask, Deployment, TaskModel
    from specreg.domain.types import TypeModel, TypeRegistry
    from specreg.loaders.backend import Backend
    from specreg.loaders.callbacks import LoadHandler

type ProjectBuilder = Callable[[Project, str | None, str], None]
type TypekitBuilder = Callable[[Any, str, str, str], Typekit]

logger = logging.getLogger(__name__)


class Loader:
    """Registry of loaded models with on-demand loading from a backend.

    Parameters:
        backend: Source of texts and reverse lookups.
        root_loader: Loader that built models resolve through. Defaults to
            this loader.
        define_dummy_types: Create null placeholder types for unknown names.
        task_collision: Policy for two different task models with one name.
        project_builder: Populates a new project from ``(path, text)``.
            Defaults to the YAML builder in :mod:`specreg.infrastructure.builders`.
        typekit_builder: Creates a typekit from raw backend data. Same default.
    """

    def __init__(
        self,
        backend: Backend,
        *,
        root_loader: Loader | None = None,
        define_dummy_types: bool = False,
        task_collision: TaskCollisionPolicy | str = TaskCollisionPolicy.OVERWRITE,
        project_builder: ProjectBuilder | None = None,
        typekit_builder: TypekitBuilder | None = None,
    ) -> None:
        if project_builder is None or typekit_builder is None:
            from specreg.infrastructure.builders import build_project, build_typekit

            project_builder = project_builder or build_project
            typekit_builder = typekit_builder or build_typekit

        self.backend = backend
        self.root_loader: Loader = root_loader if root_loader is not None else self
        self.project_builder = project_builder
        self.typekit_builder = typekit_builder
        self.models = ModelRegistry(task_collision=task_collision)
        self.resolver = TypeResolver(self.models, define_dummy_types=define_dummy_types)
        self._default_typekits: dict[str, Typekit] = {}
        self._project_states: dict[str, LoadState] = {}
        self._typekit_states: dict[str, LoadState] = {}

    def __repr__(self) -> str:
        return (
            f"Loader({len(self.loaded_projects)} projects, "
            f"{len(self.loaded_typekits)} typekits)"
        )

    # ------------------------------------------------------------------
    # Read surface
    # ------------------------------------------------------------------

    @property
    def loaded_projects(self) -> dict[str, Project]:
        return self.models.loaded_projects

    @property
    def loaded_typekits(self) -> dict[str, Typekit]:
        return self.models.loaded_typekits

    @property
    def loaded_task_models(self) -> dict[str, TaskModel]:
        return self.models.loaded_task_models

    @property
    def registry(self) -> TypeRegistry:
        """Merged registry of every loaded typekit plus ad-hoc types."""
        return self.models.registry

    @property
    def interface_typelist(self) -> set[str]:
        return self.models.interface_typelist

    @property
    def typekits_by_type_name(self) -> dict[str, list[Typekit]]:
        return self.models.typekits_by_type_name

    @property
    def define_dummy_types(self) -> bool:
        return self.resolver.define_dummy_types

    @define_dummy_types.setter
    def define_dummy_types(self, value: bool) -> None:
        self.resolver.define_dummy_types = value

    @property
    def default_typekits(self) -> list[Typekit]:
        """Typekits imported by every project created from now on."""
        return list(self._default_typekits.values())

    def project_state(self, name: str) -> LoadState:
        if name in self.models.loaded_projects:
            return LoadState.REGISTERED
        return self._project_states.get(name, LoadState.UNREQUESTED)

    def typekit_state(self, name: str) -> LoadState:
        if name in self.models.loaded_typekits:
            return LoadState.REGISTERED
        return self._typekit_states.get(name, LoadState.UNREQUESTED)

    def has_project(self, name: str) -> bool:
        return self.backend.has_project(name)

    def has_typekit(self, name: str) -> bool:
        return self.backend.has_typekit(name)

    # ------------------------------------------------------------------
    # Projects and typekits
    # ------------------------------------------------------------------

    def load_project(self, name: str) -> Project:
        """Return the project called *name*, loading it on first request.

        Raises:
            NotFound: the backend has no such project.
            LoadCycleError: the project is already being built.
        """
        project = self.models.loaded_projects.get(name)
        if project is not None:
            logger.debug("Project %s already loaded", name)
            return project

        states = self._project_states
        self._check_not_in_flight("project", name, states)
        with load_context("project", name):
            try:
                text, path = self.backend.fetch_project_text(name)
                self._advance(states, name, LoadState.TEXT_FETCHED)

                logger.info("Loading project %s", name)
                project = Project(self.root_loader, name)
                project.source_path = path
                project.imported_typekits.extend(self._default_typekits.values())
                if self.backend.has_typekit(name):
                    project.typekit = self.load_typekit(name)
                else:
                    project.typekit = Typekit(self.root_loader, name)

                self.project_builder(project, path, text)
                self._advance(states, name, LoadState.PARSED)

                self.models.register_project(project)
            finally:
                self._settle(states, name, self.models.loaded_projects)
        return project

    def load_typekit(self, name: str) -> Typekit:
        """Return the typekit called *name*, loading it on first request.

        Raises:
            NotFound: the backend has no such typekit.
            TypeConflict: one of its types clashes with an already-loaded definition.
        """
        typekit = self.models.loaded_typekits.get(name)
        if typekit is not None:
            logger.debug("Typekit %s already loaded", name)
            return typekit

        states = self._typekit_states
        self._check_not_in_flight("typekit", name, states)
        with load_context("typekit", name):
            try:
                registry_data, typelist_data = self.backend.fetch_typekit_data(name)
                self._advance(states, name, LoadState.TEXT_FETCHED)

                logger.info("Loading typekit %s", name)
                typekit = self.typekit_builder(
                    self.root_loader, name, registry_data, typelist_data
                )
                self._advance(states, name, LoadState.PARSED)

                self.models.register_typekit(typekit)
            finally:
                self._settle(states, name, self.models.loaded_typekits)
        return typekit

    def add_default_typekit(self, name: str) -> Typekit:
        """Load typekit *name* and import it into every project created afterwards."""
        typekit = self.load_typekit(name)
        self._default_typekits.setdefault(name, typekit)
        return typekit

    def load_task_library(self, name: str) -> Project:
        """Return project *name*, requiring that it defines at least one task model."""
        project = self.load_project(name)
        if not project.self_tasks:
            msg = f"there is a project called {name}, but it defines no tasks"
            raise NotFound(msg)
        return project

    # ------------------------------------------------------------------
    # Tasks and deployments
    # ------------------------------------------------------------------

    def resolve_task_model(self, name: str) -> TaskModel:
        """Return the task model called *name*, loading its library if needed."""
        model = self.models.loaded_task_models.get(name)
        if model is not None:
            return model

        library_name = self.backend.find_library_for_task(name)
        if library_name is None:
            msg = f"no task model {name} is registered"
            raise NotFound(msg)

        library = self.load_project(library_name)
        model = library.tasks.get(name)
        if model is None:
            msg = (
                f"while looking up model of {name}: found project {library_name}, "
                f"but this project does not actually have a task model called {name}"
            )
            raise InternalError(msg)
        return model

    def resolve_deployment(self, name: str) -> Deployment:
        """Return the deployment called *name*, loading its project if needed."""
        project_name = self.backend.find_project_for_deployment(name)
        if project_name is None:
            msg = f"there is no deployment called {name}"
            raise NotFound(msg)

        project = self.load_project(project_name)
        deployment = project.deployers.get(name)
        if deployment is None:
            candidates = ", ".join(sorted(project.deployers))
            msg = (
                f"cannot find the deployment called {name} in {project.name}. "
                f"Candidates were {candidates}"
            )
            raise InternalError(msg)
        return deployment

    def resolve_deployed_task(self, name: str, deployment_name: str | None = None) -> DeployedTask:
        """Return the deployed task called *name*.

        *deployment_name* is only required when more than one deployment
        defines a task with that name.

        Raises:
            NotFound: no such deployed task, or *deployment_name* lacks it.
            AmbiguousName: several deployments define it and none was given.
        """
        if deployment_name is not None:
            deployment = self.resolve_deployment(deployment_name)
        else:
            candidates = self.backend.find_deployments_for_deployed_task(name)
            if not candidates:
                msg = f"cannot find a deployed task called {name}"
                raise NotFound(msg)
            if len(candidates) > 1:
                raise AmbiguousName(name, candidates)
            deployment = self.resolve_deployment(next(iter(candidates)))

        task = deployment.find_task_by_name(name)
        if task is None:
            if deployment_name is not None:
                msg = f"deployment {deployment_name} does not have a task called {name}"
                raise NotFound(msg)
            msg = (
                f"deployment {deployment.name} was supposed to have a task called {name} "
                "but does not"
            )
            raise InternalError(msg)
        return task

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def on_project_load(self, handler: LoadHandler, *, replay: bool = True) -> LoadHandler:
        """Call *handler* with every project registered from now on.

        With *replay*, *handler* is first called synchronously with each
        already-loaded project, in load order.
        """
        initial = list(self.models.loaded_projects.values()) if replay else []
        return self.models.project_callbacks.subscribe(handler, initial)

    def on_typekit_load(self, handler: LoadHandler, *, replay: bool = True) -> LoadHandler:
        """Call *handler* with every typekit registered from now on.

        See :meth:`on_project_load`.
        """
        initial = list(self.models.loaded_typekits.values()) if replay else []
        return self.models.typekit_callbacks.subscribe(handler, initial)

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def resolve_type(self, ref: Any) -> TypeModel:
        return self.resolver.resolve_type(ref)

    def resolve_interface_type(self, ref: Any) -> TypeModel:
        return self.resolver.resolve_interface_type(ref)

    def is_interface_type(self, ref: Any) -> bool:
        return self.resolver.is_interface_type(ref)

    def typekits_declaring(self, ref: Any) -> tuple[Typekit, ...]:
        return self.resolver.typekits_declaring(ref)

    def opaque_type_for(self, ref: Any) -> TypeModel:
        return self.resolver.opaque_type_for(ref)

    def intermediate_type_for(self, ref: Any) -> TypeModel:
        return self.resolver.intermediate_type_for(ref)

    def is_m_type(self, ref: Any) -> bool:
        return self.resolver.is_m_type(ref)

    def register_type_model(
        self,
        type_model: TypeModel,
        *,
        source: TypeRegistry | None = None,
        interface: bool = True,
    ) -> None:
        self.models.register_type_model(type_model, source=source, interface=interface)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _check_not_in_flight(kind: str, name: str, states: dict[str, LoadState]) -> None:
        if is_in_flight(states.get(name, LoadState.UNREQUESTED)):
            raise LoadCycleError(kind, name)

    @staticmethod
    def _advance(states: dict[str, LoadState], name: str, target: LoadState) -> None:
        current = states.get(name, LoadState.UNREQUESTED)
        if not is_valid_transition(current, target, LOAD_TRANSITIONS):
            msg = f"invalid load transition for {name}: {current} -> {target}"
            raise InternalError(msg)
        logger.debug("%s: %s -> %s", name, current, target)
        states[name] = target

    @staticmethod
    def _settle(states: dict[str, LoadState], name: str, loaded: dict[str, Any]) -> None:
        """Mark *name* registered if it made it into the cache, else forget the attempt."""
        if name in loaded:
            states[name] = LoadState.REGISTERED
        else:
            states.pop(name, None)
