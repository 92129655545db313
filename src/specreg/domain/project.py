"""Projects, task models, and deployments.

A :class:`Project` is mutable only while a project builder populates it;
once the loader registers it, nothing changes it again. Every project
holds an explicit reference to its root loader and routes all
cross-project lookups (task libraries, typekits, interface types)
through it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from specreg.domain.typekit import Typekit
    from specreg.domain.types import TypeModel


class RootLoader(Protocol):
    """The part of the loader that models resolve through."""

    def load_task_library(self, name: str) -> Project: ...

    def load_typekit(self, name: str) -> Typekit: ...

    def resolve_task_model(self, name: str) -> TaskModel: ...

    def resolve_interface_type(self, ref: str | TypeModel) -> TypeModel: ...


def qualify_task_name(project_name: str, name: str) -> str:
    """Prefix *name* with ``project_name::`` unless it is already qualified.

    Examples:
        >>> qualify_task_name("demo", "Task")
        'demo::Task'
        >>> qualify_task_name("demo", "base::Task")
        'base::Task'
    """
    if "::" in name:
        return name
    return f"{project_name}::{name}"


class PortDirection(StrEnum):
    INPUT = "input"
    OUTPUT = "output"


@dataclass(frozen=True)
class Port:
    """A typed data port on a task model."""

    name: str
    direction: PortDirection
    type_model: TypeModel


class TaskModel:
    """Behavioral interface of a component, owned by one project."""

    def __init__(self, project: Project, name: str, superclass: TaskModel | None = None) -> None:
        self.project = project
        self.name = name
        self.superclass = superclass
        self.ports: dict[str, Port] = {}

    def __repr__(self) -> str:
        return f"TaskModel({self.name!r})"

    def all_ports(self) -> list[Port]:
        """Ports of this model, inherited ones first."""
        inherited = self.superclass.all_ports() if self.superclass is not None else []
        return [*inherited, *self.ports.values()]

    def find_port(self, name: str) -> Port | None:
        for port in self.all_ports():
            if port.name == name:
                return port
        return None

    def add_port(self, name: str, type_name: str, direction: PortDirection | str) -> Port:
        """Declare a port; its type must be usable on an interface."""
        if self.find_port(name) is not None:
            msg = f"task {self.name} already has a port called {name}"
            raise ValueError(msg)
        type_model = self.project.loader.resolve_interface_type(type_name)
        port = Port(name=name, direction=PortDirection(direction), type_model=type_model)
        self.ports[name] = port
        return port


class DeployedTask:
    """A named instance of a task model inside a deployment."""

    def __init__(self, deployment: Deployment, name: str, task_model: TaskModel) -> None:
        self.deployment = deployment
        self.name = name
        self.task_model = task_model

    def __repr__(self) -> str:
        return (
            f"DeployedTask({self.name!r}, {self.task_model.name!r}, "
            f"in {self.deployment.name!r})"
        )


class Deployment:
    """A named set of deployed tasks, owned by one project."""

    def __init__(self, project: Project, name: str) -> None:
        self.project = project
        self.name = name
        self.tasks: dict[str, DeployedTask] = {}

    def __repr__(self) -> str:
        return f"Deployment({self.name!r})"

    def task(self, name: str, model: TaskModel | str) -> DeployedTask:
        """Deploy *model* under *name*."""
        if name in self.tasks:
            msg = f"deployment {self.name} already has a task called {name}"
            raise ValueError(msg)
        if isinstance(model, str):
            model = self.project.find_task_model(model)
        deployed = DeployedTask(self, name, model)
        self.tasks[name] = deployed
        return deployed

    def find_task_by_name(self, name: str) -> DeployedTask | None:
        return self.tasks.get(name)


class Project:
    """A named specification unit.

    Attributes:
        loader: Root loader for cross-project resolution.
        name: Project name (cache key in the loader).
        typekit: The project's own typekit (possibly an empty placeholder).
        self_tasks: Task models defined by this project.
        used_task_libraries: Projects whose task models this one uses.
        imported_typekits: Typekits this project imports types from.
        deployers: Deployments defined by this project.
        source_path: Where the source text came from, if known.
    """

    def __init__(self, loader: RootLoader, name: str) -> None:
        self.loader = loader
        self.name = name
        self.typekit: Typekit | None = None
        self.self_tasks: dict[str, TaskModel] = {}
        self.used_task_libraries: list[Project] = []
        self.imported_typekits: list[Typekit] = []
        self.deployers: dict[str, Deployment] = {}
        self.source_path: str | None = None

    def __repr__(self) -> str:
        return f"Project({self.name!r})"

    @property
    def tasks(self) -> dict[str, TaskModel]:
        """Task models visible in this project: used libraries' first, then its own."""
        result: dict[str, TaskModel] = {}
        for lib in self.used_task_libraries:
            result.update(lib.self_tasks)
        result.update(self.self_tasks)
        return result

    def using_task_library(self, name: str) -> Project:
        lib = self.loader.load_task_library(name)
        if lib not in self.used_task_libraries:
            self.used_task_libraries.append(lib)
        return lib

    def import_types_from(self, name: str) -> Typekit:
        typekit = self.loader.load_typekit(name)
        if typekit not in self.imported_typekits:
            self.imported_typekits.append(typekit)
        return typekit

    def find_task_model(self, name: str) -> TaskModel:
        """Look *name* up locally (bare or qualified), then through the loader."""
        local = self.tasks
        qualified = qualify_task_name(self.name, name)
        if qualified in local:
            return local[qualified]
        if name in local:
            return local[name]
        return self.loader.resolve_task_model(name)

    def task_context(self, name: str, subclasses: TaskModel | str | None = None) -> TaskModel:
        """Define a new task model in this project."""
        qualified = qualify_task_name(self.name, name)
        if qualified in self.self_tasks:
            msg = f"project {self.name} already defines a task model called {qualified}"
            raise ValueError(msg)
        if isinstance(subclasses, str):
            subclasses = self.find_task_model(subclasses)
        model = TaskModel(self, qualified, superclass=subclasses)
        self.self_tasks[qualified] = model
        return model

    def deployment(self, name: str) -> Deployment:
        """Define a new deployment in this project."""
        if name in self.deployers:
            msg = f"project {self.name} already defines a deployment called {name}"
            raise ValueError(msg)
        deployment = Deployment(self, name)
        self.deployers[name] = deployment
        return deployment
