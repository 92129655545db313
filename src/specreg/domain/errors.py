"""Error taxonomy shared by the loader, the resolver, and the builders.

INVARIANT: Failures surface immediately to the caller. The only silent
recovery anywhere in the core is the policy-gated dummy type created by
``resolve_type``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from specreg.domain.types import TypeModel


class SpecregError(Exception):
    """Base class for every error raised by specreg."""


class NotFound(SpecregError, LookupError):
    """A named project, typekit, task model, deployment, or deployed task is absent."""


class TypeNotFound(NotFound):
    """Type resolution missed and no dummy type may be created."""

    def __init__(self, name: str, message: str | None = None) -> None:
        self.name = name
        super().__init__(message or f"cannot find a type called {name}")


class AmbiguousName(SpecregError, LookupError):
    """More than one deployment defines a deployed task with the requested name."""

    def __init__(self, name: str, candidates: Iterable[str]) -> None:
        self.name = name
        self.candidates = sorted(candidates)
        super().__init__(
            f"more than one deployment defines a deployed task called {name}: "
            f"{', '.join(self.candidates)}"
        )


class InvalidInterfaceType(SpecregError, TypeError):
    """The type is structurally unusable on a component interface."""

    def __init__(self, type_model: TypeModel, message: str) -> None:
        self.type_model = type_model
        super().__init__(message)


class NotExportedType(SpecregError, TypeError):
    """The type is known but none of its typekits export it to interfaces."""

    def __init__(self, type_model: TypeModel, typekits: Iterable[Any]) -> None:
        self.type_model = type_model
        self.typekits = tuple(typekits)
        if self.typekits:
            names = ", ".join(tk.name for tk in self.typekits)
            msg = f"{type_model.name}, defined in the {names} typekits, is never exported"
        else:
            msg = f"{type_model.name} is not declared by any typekit and is never exported"
        super().__init__(msg)


class TypeConflict(SpecregError, ValueError):
    """A type is already registered under this name with a different definition."""

    def __init__(self, name: str, existing: TypeModel, incoming: TypeModel) -> None:
        self.name = name
        self.existing = existing
        self.incoming = incoming
        super().__init__(
            f"conflicting definitions for {name}: "
            f"registered as {existing.category}, incoming {incoming.category} differs"
        )


class InternalError(SpecregError, RuntimeError):
    """A backend-reported fact turned out false once the model was loaded."""


class TaskModelConflict(SpecregError, ValueError):
    """Two different task models claim the same name."""

    def __init__(self, name: str, existing_project: str, incoming_project: str) -> None:
        self.name = name
        self.existing_project = existing_project
        self.incoming_project = incoming_project
        super().__init__(
            f"task model {name} is defined by both {existing_project} and {incoming_project}"
        )


class LoadCycleError(SpecregError, RuntimeError):
    """A project or typekit load re-entered itself before completing."""

    def __init__(self, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"{kind} {name} is already being loaded (circular dependency)")


class SpecSyntaxError(SpecregError, ValueError):
    """A project or typekit source could not be parsed."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)
