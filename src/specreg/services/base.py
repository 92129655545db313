"""BaseService — foundation for all specreg services.

Every service receives a :class:`Workspace` at construction time. The
workspace provides the root loader; services turn loader exceptions into
structured :class:`ServiceError` payloads via :meth:`BaseService._failure`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from specreg.services.result import ServiceResult

if TYPE_CHECKING:
    from specreg.domain.errors import SpecregError
    from specreg.infrastructure.workspace import Workspace
    from specreg.loaders.loader import Loader

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class InspectService(BaseService):
            def project(self, name: str) -> ServiceResult:
                try:
                    project = self._loader.load_project(name)
                except SpecregError as exc:
                    return self._failure("show_project", exc)
                ...
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    @property
    def _loader(self) -> Loader:
        return self._workspace.loader

    @staticmethod
    def _failure(op: str, exc: SpecregError) -> ServiceResult:
        """Build a failed ServiceResult from a loader exception."""
        result = ServiceResult.failure(op, exc)
        assert result.error is not None
        logger.debug("%s failed with %s: %s", op, result.error.code, exc)
        return result
