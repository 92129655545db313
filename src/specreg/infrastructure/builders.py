"""YAML project and typekit builders.

These are the default builders a :class:`~specreg.loaders.loader.Loader`
hands backend data to. Project sources describe task models and
deployments; typekit sources are a YAML type registry plus a plain-text
typelist with one ``<type name> <0|1>`` line per declared type, where
``1`` marks the type as exported to interfaces.

Builders resolve everything they reference (task libraries, typekits,
port types) through ``project.loader``, the root loader.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from specreg.domain.errors import SpecSyntaxError, TypeConflict
from specreg.domain.project import PortDirection, qualify_task_name
from specreg.domain.typekit import Typekit
from specreg.domain.types import TypeModel, TypeRegistry

if TYPE_CHECKING:
    from specreg.domain.project import Project, RootLoader

_DIRECTIONS = {d.value for d in PortDirection}


# ---------------------------------------------------------------------------
# YAML helpers
# ---------------------------------------------------------------------------


def _load_mapping(text: str, source: str | None) -> dict[str, Any]:
    try:
        data = YAML(typ="safe").load(text)
    except YAMLError as exc:
        raise SpecSyntaxError(f"invalid YAML: {exc}", source) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SpecSyntaxError("expected a mapping at the top level", source)
    return data


def _str_list(data: dict[str, Any], key: str, source: str | None) -> list[str]:
    value = data.get(key) or []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise SpecSyntaxError(f"'{key}' must be a list of names", source)
    return value


def _mapping_list(data: dict[str, Any], key: str, source: str | None) -> list[dict[str, Any]]:
    value = data.get(key) or []
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise SpecSyntaxError(f"'{key}' must be a list of mappings", source)
    return value


def _required_str(entry: dict[str, Any], key: str, source: str | None) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value:
        raise SpecSyntaxError(f"missing or invalid '{key}' in {dict(entry)!r}", source)
    return value


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


@dataclass
class ProjectSummary:
    """What a project source declares, read without building anything."""

    name: str | None
    tasks: list[str] = field(default_factory=list)
    deployments: dict[str, list[str]] = field(default_factory=dict)


def scan_project_text(
    text: str,
    path: str | None = None,
    *,
    default_name: str | None = None,
) -> ProjectSummary:
    """Extract task, deployment, and deployed-task names from a project source.

    Task names are qualified with the project name, as the builder does.
    """
    data = _load_mapping(text, path)
    name = data.get("name", default_name)
    if name is not None and not isinstance(name, str):
        raise SpecSyntaxError("'name' must be a string", path)
    summary = ProjectSummary(name=name)
    for entry in _mapping_list(data, "tasks", path):
        task_name = _required_str(entry, "name", path)
        summary.tasks.append(qualify_task_name(name, task_name) if name else task_name)
    for entry in _mapping_list(data, "deployments", path):
        deployment_name = _required_str(entry, "name", path)
        summary.deployments[deployment_name] = [
            _required_str(t, "name", path) for t in _mapping_list(entry, "tasks", path)
        ]
    return summary


def build_project(project: Project, path: str | None, text: str) -> None:
    """Populate *project* in place from its YAML source."""
    data = _load_mapping(text, path)
    declared = data.get("name")
    if declared is not None and declared != project.name:
        raise SpecSyntaxError(
            f"source declares project {declared!r} but was loaded as {project.name!r}", path
        )

    for library in _str_list(data, "using_task_library", path):
        project.using_task_library(library)
    for typekit in _str_list(data, "import_types_from", path):
        project.import_types_from(typekit)

    for entry in _mapping_list(data, "tasks", path):
        task_name = _required_str(entry, "name", path)
        if qualify_task_name(project.name, task_name) in project.self_tasks:
            raise SpecSyntaxError(f"task {task_name!r} is defined twice", path)
        subclasses = entry.get("subclasses")
        if subclasses is not None and not isinstance(subclasses, str):
            raise SpecSyntaxError(f"'subclasses' of task {task_name!r} must be a name", path)
        model = project.task_context(task_name, subclasses=subclasses)
        for port in _mapping_list(entry, "ports", path):
            port_name = _required_str(port, "name", path)
            direction = port.get("direction", PortDirection.INPUT.value)
            if direction not in _DIRECTIONS:
                raise SpecSyntaxError(
                    f"invalid direction {direction!r} for port {port_name!r}", path
                )
            if model.find_port(port_name) is not None:
                raise SpecSyntaxError(f"task {model.name} declares port {port_name!r} twice", path)
            model.add_port(port_name, _required_str(port, "type", path), direction)

    for entry in _mapping_list(data, "deployments", path):
        deployment_name = _required_str(entry, "name", path)
        if deployment_name in project.deployers:
            raise SpecSyntaxError(f"deployment {deployment_name!r} is defined twice", path)
        deployment = project.deployment(deployment_name)
        for task in _mapping_list(entry, "tasks", path):
            task_name = _required_str(task, "name", path)
            if deployment.find_task_by_name(task_name) is not None:
                raise SpecSyntaxError(
                    f"deployment {deployment_name} deploys {task_name!r} twice", path
                )
            deployment.task(task_name, _required_str(task, "model", path))


# ---------------------------------------------------------------------------
# Typekits
# ---------------------------------------------------------------------------


def parse_typelist(text: str) -> list[tuple[str, bool]]:
    """Parse typelist lines into ``(type_name, exported)`` pairs.

    Blank lines and ``#`` comments are skipped. A missing flag means exported.

    Examples:
        >>> parse_typelist("/base/Time 1\\n/base/Internal 0\\n/int32_t")
        [('/base/Time', True), ('/base/Internal', False), ('/int32_t', True)]
    """
    entries: list[tuple[str, bool]] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        parts = line.split()
        if len(parts) > 2 or (len(parts) == 2 and parts[1] not in ("0", "1")):
            raise SpecSyntaxError(f"line {lineno}: expected '<type name> <0|1>', got {raw!r}")
        entries.append((parts[0], len(parts) == 1 or parts[1] == "1"))
    return entries


def build_typekit(
    loader: RootLoader,
    name: str,
    registry_data: str,
    typelist_data: str,
) -> Typekit:
    """Create the typekit *name* from its raw registry and typelist data."""
    source = f"typekit {name}"
    data = _load_mapping(registry_data, source)

    types: list[TypeModel] = []
    for entry in _mapping_list(data, "types", source):
        try:
            types.append(TypeModel.model_validate(entry))
        except ValidationError as exc:
            raise SpecSyntaxError(f"invalid type definition {entry!r}: {exc}", source) from exc
    try:
        registry = TypeRegistry(types)
    except TypeConflict as exc:
        raise SpecSyntaxError(f"type {exc.name} is defined twice, differently", source) from exc
    for type_model in registry:
        missing = [dep for dep in type_model.dependencies() if dep not in registry]
        if missing:
            raise SpecSyntaxError(
                f"{type_model.name} uses types missing from the registry: {', '.join(missing)}",
                source,
            )

    opaques: dict[str, str] = {}
    m_types: list[str] = []
    for entry in _mapping_list(data, "opaques", source):
        opaque = _required_str(entry, "type", source)
        intermediate = _required_str(entry, "intermediate", source)
        undefined = [n for n in (opaque, intermediate) if n not in registry]
        if undefined:
            raise SpecSyntaxError(
                f"opaque {opaque} refers to types missing from the registry: "
                f"{', '.join(undefined)}",
                source,
            )
        opaques[opaque] = intermediate
        if entry.get("generated"):
            m_types.append(intermediate)

    entries = parse_typelist(typelist_data)
    undefined = sorted(n for n, _ in entries if n not in registry)
    if undefined:
        raise SpecSyntaxError(
            f"typelist declares types missing from the registry: {', '.join(undefined)}",
            source,
        )

    return Typekit(
        loader,
        name,
        registry=registry,
        typelist=[n for n, _ in entries],
        interface_typelist=[n for n, exported in entries if exported],
        opaques=opaques,
        m_types=m_types,
    )
