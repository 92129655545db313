"""Tests for Project, TaskModel, and Deployment building blocks."""

from __future__ import annotations

import pytest

from specreg.domain.errors import NotFound
from specreg.domain.project import (
    Port,
    PortDirection,
    Project,
    TaskModel,
    qualify_task_name,
)
from specreg.domain.typekit import Typekit
from specreg.domain.types import TypeModel


class _StubLoader:
    """Root loader that knows one library and resolves every type as numeric."""

    def __init__(self) -> None:
        self.library = Project(self, "lib")
        self.library.task_context("Base")
        self.typekit = Typekit(self, "tk")
        self.resolved: list[str] = []

    def load_task_library(self, name: str) -> Project:
        if name != "lib":
            raise NotFound(name)
        return self.library

    def load_typekit(self, name: str) -> Typekit:
        return self.typekit

    def resolve_task_model(self, name: str) -> TaskModel:
        try:
            return self.library.self_tasks[name]
        except KeyError:
            raise NotFound(name) from None

    def resolve_interface_type(self, ref: str | TypeModel) -> TypeModel:
        name = ref if isinstance(ref, str) else ref.name
        self.resolved.append(name)
        return TypeModel(name=name, category="numeric")


@pytest.fixture
def stub() -> _StubLoader:
    return _StubLoader()


@pytest.fixture
def project(stub: _StubLoader) -> Project:
    return Project(stub, "demo")


class TestQualifyTaskName:
    def test_bare_name_is_prefixed(self) -> None:
        assert qualify_task_name("demo", "Task") == "demo::Task"

    def test_qualified_name_kept(self) -> None:
        assert qualify_task_name("demo", "lib::Task") == "lib::Task"


class TestProject:
    def test_using_task_library_once(self, project: Project, stub: _StubLoader) -> None:
        project.using_task_library("lib")
        project.using_task_library("lib")
        assert project.used_task_libraries == [stub.library]

    def test_import_types_from_once(self, project: Project, stub: _StubLoader) -> None:
        project.import_types_from("tk")
        project.import_types_from("tk")
        assert project.imported_typekits == [stub.typekit]

    def test_tasks_include_used_libraries(self, project: Project) -> None:
        project.using_task_library("lib")
        project.task_context("Own")
        assert list(project.tasks) == ["lib::Base", "demo::Own"]
        assert list(project.self_tasks) == ["demo::Own"]

    def test_task_context_with_superclass_name(self, project: Project) -> None:
        project.using_task_library("lib")
        model = project.task_context("Child", subclasses="lib::Base")
        assert model.superclass is not None
        assert model.superclass.name == "lib::Base"

    def test_task_context_duplicate(self, project: Project) -> None:
        project.task_context("Own")
        with pytest.raises(ValueError, match="already defines"):
            project.task_context("Own")

    def test_find_task_model_falls_back_to_loader(self, project: Project) -> None:
        assert project.find_task_model("lib::Base").name == "lib::Base"

    def test_find_task_model_unknown(self, project: Project) -> None:
        with pytest.raises(NotFound):
            project.find_task_model("nowhere::Task")


class TestTaskModel:
    def test_add_port_resolves_interface_type(self, project: Project, stub: _StubLoader) -> None:
        model = project.task_context("Own")
        port = model.add_port("in", "/int32_t", "input")
        assert port == Port(
            name="in",
            direction=PortDirection.INPUT,
            type_model=TypeModel(name="/int32_t", category="numeric"),
        )
        assert stub.resolved == ["/int32_t"]

    def test_inherited_ports_first(self, project: Project) -> None:
        parent = project.task_context("Parent")
        parent.add_port("a", "/a", PortDirection.OUTPUT)
        child = project.task_context("Child", subclasses=parent)
        child.add_port("b", "/b", PortDirection.INPUT)
        assert [p.name for p in child.all_ports()] == ["a", "b"]
        assert child.find_port("a") is parent.ports["a"]

    def test_duplicate_port_rejected(self, project: Project) -> None:
        model = project.task_context("Own")
        model.add_port("a", "/a", "input")
        with pytest.raises(ValueError, match="already has a port"):
            model.add_port("a", "/b", "output")


class TestDeployment:
    def test_task_by_model_name(self, project: Project) -> None:
        model = project.task_context("Own")
        deployment = project.deployment("dep")
        deployed = deployment.task("own", "Own")
        assert deployed.task_model is model
        assert deployment.find_task_by_name("own") is deployed
        assert deployment.find_task_by_name("missing") is None

    def test_duplicate_deployment(self, project: Project) -> None:
        project.deployment("dep")
        with pytest.raises(ValueError, match="already defines a deployment"):
            project.deployment("dep")

    def test_duplicate_deployed_task(self, project: Project) -> None:
        model = project.task_context("Own")
        deployment = project.deployment("dep")
        deployment.task("own", model)
        with pytest.raises(ValueError, match="already has a task"):
            deployment.task("own", model)
