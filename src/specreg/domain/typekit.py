"""Typekit — a named, shareable collection of type definitions.

Besides its registry fragment, a typekit records which of its types are
exported to component interfaces and how opaque types pair with the
intermediate types used to marshal them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from specreg.domain.errors import TypeNotFound
from specreg.domain.types import TypeModel, TypeRegistry

if TYPE_CHECKING:
    from specreg.domain.project import RootLoader


def _type_name(ref: str | TypeModel) -> str:
    return ref if isinstance(ref, str) else ref.name


class Typekit:
    """Type definitions owned by one typekit.

    Attributes:
        loader: Root loader this typekit resolves through.
        name: Typekit name (cache key in the loader).
        registry: This typekit's registry fragment.
        typelist: Declared type names, in declaration order.
        interface_typelist: The declared names exported to interfaces.
        opaques: Opaque type name -> intermediate type name.
        m_types: Intermediate types that were generated rather than hand-written.
    """

    def __init__(
        self,
        loader: RootLoader,
        name: str,
        registry: TypeRegistry | None = None,
        typelist: Iterable[str] = (),
        interface_typelist: Iterable[str] = (),
        opaques: Mapping[str, str] | None = None,
        m_types: Iterable[str] = (),
    ) -> None:
        self.loader = loader
        self.name = name
        self.registry = registry if registry is not None else TypeRegistry()
        self.typelist: list[str] = list(dict.fromkeys(typelist))
        self.interface_typelist: set[str] = set(interface_typelist)
        self.opaques: dict[str, str] = dict(opaques or {})
        self.m_types: set[str] = set(m_types)
        self._opaques_by_intermediate = {v: k for k, v in self.opaques.items()}

    def __repr__(self) -> str:
        return f"Typekit({self.name!r}, {len(self.typelist)} types)"

    @property
    def is_empty(self) -> bool:
        return not self.typelist

    def includes(self, ref: str | TypeModel) -> bool:
        """Whether this typekit declares the type."""
        return _type_name(ref) in self.typelist

    def find_type(self, ref: str | TypeModel) -> TypeModel:
        name = _type_name(ref)
        type_model = self.registry.find(name)
        if type_model is None:
            raise TypeNotFound(name, f"typekit {self.name} does not define {name}")
        return type_model

    def is_interface_type(self, ref: str | TypeModel) -> bool:
        return _type_name(ref) in self.interface_typelist

    def is_opaque(self, ref: str | TypeModel) -> bool:
        return _type_name(ref) in self.opaques

    def opaque_type_for(self, ref: str | TypeModel) -> TypeModel:
        """Return the opaque paired with an intermediate type, or the type itself."""
        name = _type_name(ref)
        opaque = self._opaques_by_intermediate.get(name)
        return self.find_type(opaque if opaque is not None else name)

    def intermediate_type_for(self, ref: str | TypeModel) -> TypeModel:
        """Return the intermediate type of an opaque, or the type itself."""
        name = _type_name(ref)
        return self.find_type(self.opaques.get(name, name))

    def is_m_type(self, ref: str | TypeModel) -> bool:
        """Whether this is an intermediate type generated for an opaque."""
        name = _type_name(ref)
        self.find_type(name)
        return name in self.m_types
