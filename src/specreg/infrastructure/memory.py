"""InMemoryBackend — a backend fed directly with source strings.

Reverse lookups (task model -> library, deployment -> project, deployed
task -> deployments) are indexed when a project is added, by scanning its
source without building it. :class:`ProjectIndex` is shared with the
files backend.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from specreg.domain.errors import NotFound
from specreg.infrastructure.builders import scan_project_text
from specreg.loaders.backend import Backend

if TYPE_CHECKING:
    from specreg.infrastructure.builders import ProjectSummary


@dataclass
class ProjectIndex:
    """Reverse lookups over the projects a backend knows about.

    The first project to declare a task model or deployment name owns it.
    """

    task_libraries: dict[str, str] = field(default_factory=dict)
    deployment_projects: dict[str, str] = field(default_factory=dict)
    deployed_tasks: dict[str, set[str]] = field(default_factory=dict)

    def add(self, project_name: str, summary: ProjectSummary) -> None:
        for task_name in summary.tasks:
            self.task_libraries.setdefault(task_name, project_name)
        for deployment, task_names in summary.deployments.items():
            self.deployment_projects.setdefault(deployment, project_name)
            for task_name in task_names:
                self.deployed_tasks.setdefault(task_name, set()).add(deployment)

    def deployments_for(self, task_name: str) -> set[str]:
        return set(self.deployed_tasks.get(task_name, ()))


class InMemoryBackend(Backend):
    """Backend holding project and typekit sources in dictionaries."""

    def __init__(self) -> None:
        self._projects: dict[str, tuple[str, str | None]] = {}
        self._typekits: dict[str, tuple[str, str]] = {}
        self.index = ProjectIndex()

    def add_project(self, name: str, text: str, path: str | None = None) -> None:
        """Make project *name* available, indexing what it declares."""
        summary = scan_project_text(text, path, default_name=name)
        self._projects[name] = (text, path)
        self.index.add(name, summary)

    def add_typekit(self, name: str, registry_data: str, typelist_data: str) -> None:
        self._typekits[name] = (registry_data, typelist_data)

    # ------------------------------------------------------------------
    # Backend contract
    # ------------------------------------------------------------------

    def fetch_project_text(self, name: str) -> tuple[str, str | None]:
        try:
            return self._projects[name]
        except KeyError:
            msg = f"there is no project called {name}"
            raise NotFound(msg) from None

    def fetch_typekit_data(self, name: str) -> tuple[str, str]:
        try:
            return self._typekits[name]
        except KeyError:
            msg = f"there is no typekit called {name}"
            raise NotFound(msg) from None

    def has_project(self, name: str) -> bool:
        return name in self._projects

    def has_typekit(self, name: str) -> bool:
        return name in self._typekits

    def find_library_for_task(self, task_model_name: str) -> str | None:
        return self.index.task_libraries.get(task_model_name)

    def find_project_for_deployment(self, deployment_name: str) -> str | None:
        return self.index.deployment_projects.get(deployment_name)

    def find_deployments_for_deployed_task(self, task_name: str) -> set[str]:
        return self.index.deployments_for(task_name)

    def available_projects(self) -> list[str]:
        return sorted(self._projects)
