"""Type definitions and the name-keyed type registry.

A :class:`TypeModel` is a frozen description of one named type. Two
definitions have "the same shape" exactly when they compare equal, which
is what makes merging idempotent: re-adding an equal definition is a
no-op, adding a differing one raises :class:`TypeConflict`.

The registry is append-only. Dependency closures (``minimal``) are
computed on a NetworkX digraph built from ``TypeModel.dependencies()``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import StrEnum
from typing import Self

import networkx as nx
from pydantic import BaseModel, model_validator

from specreg.domain.errors import TypeConflict, TypeNotFound


class TypeCategory(StrEnum):
    """Structural kind of a type definition."""

    NULL = "null"
    NUMERIC = "numeric"
    ENUM = "enum"
    COMPOUND = "compound"
    ARRAY = "array"
    CONTAINER = "container"
    OPAQUE = "opaque"


class TypeField(BaseModel):
    """One field of a compound type."""

    model_config = {"frozen": True}

    name: str
    type: str


class TypeModel(BaseModel):
    """A single named type definition."""

    model_config = {"frozen": True}

    name: str
    category: TypeCategory
    size: int | None = None
    element: str | None = None
    length: int | None = None
    container: str | None = None
    fields: tuple[TypeField, ...] = ()
    symbols: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_shape(self) -> Self:
        if self.category == TypeCategory.ARRAY and (self.element is None or self.length is None):
            msg = f"array type {self.name} needs both an element type and a length"
            raise ValueError(msg)
        if self.category == TypeCategory.CONTAINER and self.element is None:
            msg = f"container type {self.name} needs an element type"
            raise ValueError(msg)
        return self

    @classmethod
    def null(cls, name: str) -> TypeModel:
        """Placeholder definition used for unknown types."""
        return cls(name=name, category=TypeCategory.NULL)

    @property
    def is_array(self) -> bool:
        """Whether this is a fixed-size array."""
        return self.category == TypeCategory.ARRAY

    @property
    def is_null(self) -> bool:
        return self.category == TypeCategory.NULL

    def dependencies(self) -> list[str]:
        """Names of the types this definition refers to, in declaration order."""
        deps: list[str] = []
        if self.element is not None:
            deps.append(self.element)
        for f in self.fields:
            if f.type not in deps:
                deps.append(f.type)
        return deps


class TypeRegistry:
    """Ordered, append-only mapping from type name to :class:`TypeModel`."""

    def __init__(self, types: Iterable[TypeModel] = ()) -> None:
        self._types: dict[str, TypeModel] = {}
        for type_model in types:
            self.add(type_model)

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[TypeModel]:
        return iter(list(self._types.values()))

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        return f"TypeRegistry({len(self._types)} types)"

    def names(self) -> list[str]:
        """Registered type names, in registration order."""
        return list(self._types)

    def find(self, name: str) -> TypeModel | None:
        return self._types.get(name)

    def get(self, name: str) -> TypeModel:
        """Return the definition of *name* or raise :class:`TypeNotFound`."""
        try:
            return self._types[name]
        except KeyError:
            raise TypeNotFound(name) from None

    def add(self, type_model: TypeModel) -> TypeModel:
        """Register *type_model*; equal re-registration is a no-op."""
        self._check_conflict(type_model)
        self._types.setdefault(type_model.name, type_model)
        return self._types[type_model.name]

    def merge(self, other: TypeRegistry) -> None:
        """Union *other* into this registry.

        All incoming definitions are checked before anything is added, so a
        conflicting merge leaves this registry unchanged.
        """
        incoming = list(other)
        for type_model in incoming:
            self._check_conflict(type_model)
        for type_model in incoming:
            self._types.setdefault(type_model.name, type_model)

    def create_null(self, name: str) -> TypeModel:
        """Register and return a null placeholder for *name*."""
        return self.add(TypeModel.null(name))

    def dependency_graph(self) -> nx.DiGraph:
        """Directed graph with an edge from each type to every type it uses."""
        g = nx.DiGraph()
        for type_model in self._types.values():
            g.add_node(type_model.name)
            for dep in type_model.dependencies():
                g.add_edge(type_model.name, dep)
        return g

    def minimal(self, name: str) -> TypeRegistry:
        """Return a new registry with *name* and everything it depends on."""
        root = self.get(name)
        closure = nx.descendants(self.dependency_graph(), root.name)
        missing = sorted(n for n in closure if n not in self._types)
        if missing:
            raise TypeNotFound(
                missing[0],
                f"{name} depends on {', '.join(missing)}, which are not registered",
            )
        return TypeRegistry(
            t for t in self._types.values() if t.name == root.name or t.name in closure
        )

    def _check_conflict(self, type_model: TypeModel) -> None:
        existing = self._types.get(type_model.name)
        if existing is not None and existing != type_model:
            raise TypeConflict(type_model.name, existing, type_model)
