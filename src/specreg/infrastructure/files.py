"""FilesBackend — project and typekit sources discovered on disk.

Each search directory is scanned recursively for:

- ``<name>.project.yml``: project source
- ``<name>.typekit.yml``: typekit registry data
- ``<name>.typelist``: typekit typelist, next to its registry file

When a name appears in several search directories, the first directory
wins. Source text is re-read from disk on every fetch; the loader caches
built models, not text. A project source that cannot be scanned is still
listed under its file name, so loading it reports the syntax error.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from specreg.domain.errors import NotFound, SpecSyntaxError
from specreg.infrastructure.builders import scan_project_text
from specreg.infrastructure.memory import ProjectIndex
from specreg.loaders.backend import Backend

if TYPE_CHECKING:
    from collections.abc import Iterable

PROJECT_SUFFIX = ".project.yml"
TYPEKIT_SUFFIX = ".typekit.yml"
TYPELIST_SUFFIX = ".typelist"

# Directories to skip during discovery.
_SKIP_DIRS = frozenset({".git", "__pycache__", "build"})

logger = logging.getLogger(__name__)


def find_source_files(root: Path, suffix: str) -> list[Path]:
    """Find files under *root* ending in *suffix*, sorted, skipping build dirs."""
    if not root.is_dir():
        return []
    return sorted(
        p
        for p in root.rglob(f"*{suffix}")
        if p.is_file() and not any(part in _SKIP_DIRS for part in p.relative_to(root).parts)
    )


def _stem(path: Path, suffix: str) -> str:
    return path.name[: -len(suffix)]


class FilesBackend(Backend):
    """Backend reading sources from a list of search directories."""

    def __init__(self, search_paths: Iterable[Path]) -> None:
        self.search_paths = [Path(p) for p in search_paths]
        self._projects: dict[str, Path] = {}
        self._typekits: dict[str, tuple[Path, Path]] = {}
        self.index = ProjectIndex()
        self._scan()

    def _scan(self) -> None:
        for root in self.search_paths:
            if not root.is_dir():
                logger.warning("Search path %s is not a directory", root)
                continue
            for path in find_source_files(root, PROJECT_SUFFIX):
                name = _stem(path, PROJECT_SUFFIX)
                if name not in self._projects:
                    self._index_project(name, path)
            for path in find_source_files(root, TYPEKIT_SUFFIX):
                name = _stem(path, TYPEKIT_SUFFIX)
                typelist = path.with_name(f"{name}{TYPELIST_SUFFIX}")
                if not typelist.is_file():
                    logger.warning("Ignoring typekit %s: %s is missing", name, typelist)
                    continue
                self._typekits.setdefault(name, (path, typelist))
        logger.debug(
            "Indexed %d projects and %d typekits",
            len(self._projects),
            len(self._typekits),
        )

    def _index_project(self, name: str, path: Path) -> None:
        self._projects[name] = path
        try:
            summary = scan_project_text(
                path.read_text(encoding="utf-8"), str(path), default_name=name
            )
        except SpecSyntaxError as exc:
            logger.warning("Not indexing project %s: %s", name, exc)
            return
        self.index.add(name, summary)

    # ------------------------------------------------------------------
    # Backend contract
    # ------------------------------------------------------------------

    def fetch_project_text(self, name: str) -> tuple[str, str | None]:
        path = self._projects.get(name)
        if path is None:
            msg = f"there is no project called {name} in {self._describe_paths()}"
            raise NotFound(msg)
        return path.read_text(encoding="utf-8"), str(path)

    def fetch_typekit_data(self, name: str) -> tuple[str, str]:
        paths = self._typekits.get(name)
        if paths is None:
            msg = f"there is no typekit called {name} in {self._describe_paths()}"
            raise NotFound(msg)
        registry_path, typelist_path = paths
        return (
            registry_path.read_text(encoding="utf-8"),
            typelist_path.read_text(encoding="utf-8"),
        )

    def has_project(self, name: str) -> bool:
        return name in self._projects

    def has_typekit(self, name: str) -> bool:
        return name in self._typekits

    def find_library_for_task(self, task_model_name: str) -> str | None:
        return self.index.task_libraries.get(task_model_name)

    def find_project_for_deployment(self, deployment_name: str) -> str | None:
        return self.index.deployment_projects.get(deployment_name)

    def find_deployments_for_deployed_task(self, task_name: str) -> set[str]:
        return self.index.deployments_for(task_name)

    def available_projects(self) -> list[str]:
        return sorted(self._projects)

    def available_typekits(self) -> list[str]:
        return sorted(self._typekits)

    def _describe_paths(self) -> str:
        if not self.search_paths:
            return "an empty search path"
        return ", ".join(str(p) for p in self.search_paths)
