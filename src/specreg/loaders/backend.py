"""Backend — where the loader gets source text and reverse lookups from.

The loader holds a backend by reference; it never inherits from one.
Every call either returns complete data or signals absence (``NotFound``,
``None``, or an empty set), never partial data. Calls are blocking and the
loader wraps them in no retry or timeout logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class Backend(ABC):
    """Source of project texts, typekit data, and name lookups."""

    @abstractmethod
    def fetch_project_text(self, name: str) -> tuple[str, str | None]:
        """Return ``(text, path)`` for project *name*.

        *path* is ``None`` when the text does not come from a file.
        Raises :class:`~specreg.domain.errors.NotFound` if there is no such project.
        """

    @abstractmethod
    def fetch_typekit_data(self, name: str) -> tuple[str, str]:
        """Return ``(registry_data, typelist_data)`` for typekit *name*.

        Raises :class:`~specreg.domain.errors.NotFound` if there is no such typekit.
        """

    @abstractmethod
    def has_project(self, name: str) -> bool: ...

    @abstractmethod
    def has_typekit(self, name: str) -> bool: ...

    @abstractmethod
    def find_library_for_task(self, task_model_name: str) -> str | None:
        """Name of the project defining *task_model_name*, if any."""

    @abstractmethod
    def find_project_for_deployment(self, deployment_name: str) -> str | None:
        """Name of the project defining *deployment_name*, if any."""

    @abstractmethod
    def find_deployments_for_deployed_task(self, task_name: str) -> set[str]:
        """Names of every deployment containing a task called *task_name*."""

    def available_projects(self) -> list[str]:
        """Names of all projects this backend can provide, when it can enumerate them."""
        return []
