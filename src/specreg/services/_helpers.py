"""Shared service-layer helpers that flatten models into result payloads."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from specreg.domain.project import DeployedTask, Deployment, Port, Project, TaskModel
    from specreg.domain.typekit import Typekit
    from specreg.domain.types import TypeModel


def describe_type(type_model: TypeModel) -> dict[str, Any]:
    """JSON-ready dump of a type definition, without unset fields."""
    return type_model.model_dump(mode="json", exclude_defaults=True)


def describe_port(port: Port) -> dict[str, Any]:
    return {
        "name": port.name,
        "direction": port.direction.value,
        "type": port.type_model.name,
    }


def describe_task_model(model: TaskModel) -> dict[str, Any]:
    return {
        "name": model.name,
        "project": model.project.name,
        "superclass": model.superclass.name if model.superclass is not None else None,
        "ports": [describe_port(p) for p in model.all_ports()],
    }


def describe_deployed_task(task: DeployedTask) -> dict[str, Any]:
    return {
        "name": task.name,
        "deployment": task.deployment.name,
        "model": task.task_model.name,
    }


def describe_deployment(deployment: Deployment) -> dict[str, Any]:
    return {
        "name": deployment.name,
        "project": deployment.project.name,
        "tasks": [describe_deployed_task(t) for t in deployment.tasks.values()],
    }


def describe_typekit(typekit: Typekit) -> dict[str, Any]:
    return {
        "name": typekit.name,
        "types": list(typekit.typelist),
        "interface_types": sorted(typekit.interface_typelist),
        "opaques": dict(typekit.opaques),
        "m_types": sorted(typekit.m_types),
    }


def describe_project(project: Project) -> dict[str, Any]:
    """Summary of a project: what it uses, defines, and deploys."""
    return {
        "name": project.name,
        "source_path": project.source_path,
        "typekit": project.typekit.name
        if project.typekit is not None and not project.typekit.is_empty
        else None,
        "used_task_libraries": [lib.name for lib in project.used_task_libraries],
        "imported_typekits": [tk.name for tk in project.imported_typekits],
        "tasks": sorted(project.self_tasks),
        "deployments": sorted(project.deployers),
    }
