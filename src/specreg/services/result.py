"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer methods return ServiceResult.
The CLI and any future interface consume this type.

Loader exceptions become :class:`ServiceError` payloads through
:meth:`ServiceError.from_exception`: the exception class picks the
:class:`ErrorCode`, and the attributes it carries (candidate deployments,
declaring typekits, source path, ...) become ``detail``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from specreg.domain.errors import (
    AmbiguousName,
    InternalError,
    InvalidInterfaceType,
    LoadCycleError,
    NotExportedType,
    NotFound,
    SpecregError,
    SpecSyntaxError,
    TaskModelConflict,
    TypeConflict,
    TypeNotFound,
)


class ErrorCode(StrEnum):
    """Machine-readable failure codes."""

    TYPE_NOT_FOUND = "TYPE_NOT_FOUND"
    NOT_FOUND = "NOT_FOUND"
    AMBIGUOUS_NAME = "AMBIGUOUS_NAME"
    INVALID_INTERFACE_TYPE = "INVALID_INTERFACE_TYPE"
    NOT_EXPORTED_TYPE = "NOT_EXPORTED_TYPE"
    TYPE_CONFLICT = "TYPE_CONFLICT"
    TASK_MODEL_CONFLICT = "TASK_MODEL_CONFLICT"
    LOAD_CYCLE = "LOAD_CYCLE"
    SYNTAX_ERROR = "SYNTAX_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    CHECK_FAILED = "CHECK_FAILED"


# Most specific first: TypeNotFound is also a NotFound.
EXCEPTION_CODES: list[tuple[type[SpecregError], ErrorCode]] = [
    (TypeNotFound, ErrorCode.TYPE_NOT_FOUND),
    (NotFound, ErrorCode.NOT_FOUND),
    (AmbiguousName, ErrorCode.AMBIGUOUS_NAME),
    (InvalidInterfaceType, ErrorCode.INVALID_INTERFACE_TYPE),
    (NotExportedType, ErrorCode.NOT_EXPORTED_TYPE),
    (TypeConflict, ErrorCode.TYPE_CONFLICT),
    (TaskModelConflict, ErrorCode.TASK_MODEL_CONFLICT),
    (LoadCycleError, ErrorCode.LOAD_CYCLE),
    (SpecSyntaxError, ErrorCode.SYNTAX_ERROR),
    (InternalError, ErrorCode.INTERNAL_ERROR),
]


def error_code(exc: SpecregError) -> ErrorCode:
    """Map a specreg exception to its ServiceError code."""
    for exc_type, code in EXCEPTION_CODES:
        if isinstance(exc, exc_type):
            return code
    return ErrorCode.INTERNAL_ERROR


def error_detail(exc: SpecregError) -> dict[str, Any]:
    """Extract the structured attributes an exception carries."""
    detail: dict[str, Any] = {}
    if isinstance(exc, AmbiguousName):
        detail["name"] = exc.name
        detail["candidates"] = list(exc.candidates)
    elif isinstance(exc, NotExportedType):
        detail["type"] = exc.type_model.name
        detail["typekits"] = [tk.name for tk in exc.typekits]
    elif isinstance(exc, InvalidInterfaceType):
        detail["type"] = exc.type_model.name
    elif isinstance(exc, TypeConflict):
        detail["type"] = exc.name
    elif isinstance(exc, TaskModelConflict):
        detail["task"] = exc.name
        detail["projects"] = [exc.existing_project, exc.incoming_project]
    elif isinstance(exc, LoadCycleError):
        detail["kind"] = exc.kind
        detail["name"] = exc.name
    elif isinstance(exc, TypeNotFound):
        detail["type"] = exc.name
    elif isinstance(exc, SpecSyntaxError) and exc.path is not None:
        detail["path"] = exc.path
    return detail


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: ErrorCode
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: SpecregError) -> ServiceError:
        return cls(code=error_code(exc), message=str(exc), detail=error_detail(exc))


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"show_project"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, exc: SpecregError) -> ServiceResult:
        """Failed result for *op* describing the loader exception *exc*."""
        return cls(ok=False, op=op, error=ServiceError.from_exception(exc))
