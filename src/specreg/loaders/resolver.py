"""TypeResolver — type lookup and interface validation over a ModelRegistry.

Tie-break for opaque / intermediate / m-type queries: when several
typekits declare the same type name, the earliest-registered one answers.
Divergent definitions across those typekits are not reconciled here.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from specreg.domain.errors import InvalidInterfaceType, NotExportedType, TypeNotFound
from specreg.domain.types import TypeModel

if TYPE_CHECKING:
    from specreg.domain.typekit import Typekit
    from specreg.loaders.registry import ModelRegistry

logger = logging.getLogger(__name__)


def type_name_of(ref: Any) -> str:
    """Accept a type name or anything exposing ``.name``."""
    if isinstance(ref, str):
        return ref
    name = getattr(ref, "name", None)
    if not isinstance(name, str):
        msg = f"expected a type name or an object with a name, got {ref!r}"
        raise TypeError(msg)
    return name


class TypeResolver:
    """Resolves type names against the merged registry of a loader.

    Parameters:
        models: Registry whose type state is queried (and, for dummy
            types, extended).
        define_dummy_types: Create a null placeholder for unknown types
            instead of raising :class:`TypeNotFound`.
    """

    def __init__(self, models: ModelRegistry, *, define_dummy_types: bool = False) -> None:
        self._models = models
        self.define_dummy_types = define_dummy_types

    def resolve_type(self, ref: Any) -> TypeModel:
        """Return the registered definition for *ref*."""
        name = type_name_of(ref)
        found = self._models.registry.find(name)
        if found is not None:
            return found
        if not self.define_dummy_types:
            raise TypeNotFound(name)
        logger.debug("Defining dummy type %s", name)
        dummy = TypeModel.null(name)
        self._models.register_type_model(dummy, interface=True)
        return dummy

    def resolve_interface_type(self, ref: Any) -> TypeModel:
        """Return the type for *ref*, checking that it may appear on an interface."""
        type_model = self.resolve_type(ref)
        if type_model.is_array:
            raise InvalidInterfaceType(
                type_model,
                f"{type_model.name}: static arrays are not valid interface types. "
                "Use an array in a structure or a std::vector",
            )
        if not self.is_interface_type(type_model):
            typekits: tuple[Typekit, ...] = ()
            if type_model.name in self._models.typekits_by_type_name:
                typekits = self.typekits_declaring(type_model)
            raise NotExportedType(type_model, typekits)
        return type_model

    def is_interface_type(self, ref: Any) -> bool:
        return type_name_of(ref) in self._models.interface_typelist

    def typekits_declaring(self, ref: Any) -> tuple[Typekit, ...]:
        """Typekits that declare *ref*, in registration order.

        Raises ``ValueError`` for types no typekit declares, which includes
        dummy and other ad-hoc types.
        """
        name = type_name_of(ref)
        typekits = self._models.typekits_by_type_name.get(name)
        if not typekits:
            msg = f"{name} is not an imported type"
            raise ValueError(msg)
        return tuple(typekits)

    def opaque_type_for(self, ref: Any) -> TypeModel:
        return self._first_declaring(ref).opaque_type_for(type_name_of(ref))

    def intermediate_type_for(self, ref: Any) -> TypeModel:
        return self._first_declaring(ref).intermediate_type_for(type_name_of(ref))

    def is_m_type(self, ref: Any) -> bool:
        """Whether *ref* is an intermediate type generated for an opaque."""
        return self._first_declaring(ref).is_m_type(type_name_of(ref))

    def _first_declaring(self, ref: Any) -> Typekit:
        return self.typekits_declaring(ref)[0]
