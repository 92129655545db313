"""CheckService — load projects and report every one that fails.

Follows the linter pattern: nothing stops at the first problem. Each
project is loaded through the shared root loader, so a library that
fails to load is reported once for itself and again for every project
that uses it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from specreg.domain.errors import SpecregError
from specreg.services.base import BaseService
from specreg.services.result import ErrorCode, ServiceError, ServiceResult

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


class CheckService(BaseService):
    """Loads projects and collects load failures as issues."""

    def check(self, names: Iterable[str] | None = None) -> ServiceResult:
        """Load each project in *names* (default: every available project).

        Returns ``ok=False`` with code ``CHECK_FAILED`` when any project
        fails; ``data["issues"]`` lists one entry per failing project.
        """
        targets = list(names) if names is not None else self._workspace.available_projects()
        warnings: list[str] = []
        if not targets:
            warnings.append("No projects found in the search path")

        issues: list[dict[str, Any]] = []
        checked: list[str] = []
        for name in targets:
            try:
                self._loader.load_project(name)
            except SpecregError as exc:
                logger.debug("Project %s failed to load", name, exc_info=True)
                error = ServiceError.from_exception(exc)
                issues.append({"project": name, **error.model_dump(mode="json")})
                continue
            checked.append(name)

        data = {"checked": checked, "issues": issues, "count": len(issues)}
        if issues:
            return ServiceResult(
                ok=False,
                op="check",
                data=data,
                warnings=warnings,
                error=ServiceError(
                    code=ErrorCode.CHECK_FAILED,
                    message=f"{len(issues)} of {len(targets)} projects failed to load",
                    detail={"issues": issues},
                ),
            )
        return ServiceResult(ok=True, op="check", data=data, warnings=warnings)
