"""InspectService — look up one model by name and describe it.

Each operation goes through the workspace's root loader, so asking for a
model loads it (and everything it references) on first use.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from specreg.domain.errors import SpecregError
from specreg.services._helpers import (
    describe_deployed_task,
    describe_deployment,
    describe_project,
    describe_task_model,
    describe_type,
    describe_typekit,
)
from specreg.services.base import BaseService
from specreg.services.result import ServiceResult

if TYPE_CHECKING:
    from collections.abc import Iterable


class InspectService(BaseService):
    """Read-only views of projects, typekits, types, tasks, and deployments."""

    def project(self, name: str) -> ServiceResult:
        op = "show_project"
        try:
            project = self._loader.load_project(name)
        except SpecregError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data=describe_project(project))

    def typekit(self, name: str) -> ServiceResult:
        op = "show_typekit"
        try:
            typekit = self._loader.load_typekit(name)
        except SpecregError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data=describe_typekit(typekit))

    def type(
        self,
        name: str,
        *,
        interface: bool = False,
        typekits: Iterable[str] = (),
    ) -> ServiceResult:
        """Describe type *name*.

        Types are only known once a typekit declaring them is loaded; the
        *typekits* named here are loaded first. With *interface*, the type
        must also be usable on a task interface, which reports arrays and
        non-exported types as errors.
        """
        op = "show_type"
        loader = self._loader
        try:
            for typekit in typekits:
                loader.load_typekit(typekit)
            if interface:
                type_model = loader.resolve_interface_type(name)
            else:
                type_model = loader.resolve_type(name)
            data = describe_type(type_model)
            declared_by = [tk.name for tk in loader.typekits_by_type_name.get(type_model.name, [])]
            if declared_by:
                data["opaque"] = loader.opaque_type_for(type_model).name
                data["intermediate"] = loader.intermediate_type_for(type_model).name
                data["m_type"] = loader.is_m_type(type_model)
            dependencies = loader.registry.minimal(type_model.name).names()
        except SpecregError as exc:
            return self._failure(op, exc)

        warnings: list[str] = []
        if type_model.is_null and not declared_by:
            warnings.append(f"{type_model.name} is a placeholder created for an unknown type")

        data["declared_by"] = declared_by
        data["interface"] = loader.is_interface_type(type_model)
        data["dependencies"] = [n for n in dependencies if n != type_model.name]
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def task(self, name: str) -> ServiceResult:
        op = "show_task"
        try:
            model = self._loader.resolve_task_model(name)
        except SpecregError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data=describe_task_model(model))

    def deployment(self, name: str) -> ServiceResult:
        op = "show_deployment"
        try:
            deployment = self._loader.resolve_deployment(name)
        except SpecregError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data=describe_deployment(deployment))

    def deployed_task(self, name: str, deployment: str | None = None) -> ServiceResult:
        op = "show_deployed_task"
        try:
            task = self._loader.resolve_deployed_task(name, deployment)
        except SpecregError as exc:
            return self._failure(op, exc)
        data = describe_deployed_task(task)
        data["task_model"] = describe_task_model(task.task_model)
        return ServiceResult(ok=True, op=op, data=data)
