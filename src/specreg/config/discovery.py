"""Config file discovery and search-path resolution.

Walk-up finder locates specreg.toml, similar to how git finds .git/.
Supports SPECREG_CONFIG env var and --config CLI flag overrides.

Sources are searched for in, first match winning:
  1. ``-I`` directories from the command line
  2. ``[paths] search`` entries, relative to the config file's directory
  3. ``SPECREG_PATH`` entries (``os.pathsep``-separated), relative to CWD
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

CONFIG_FILENAME = "specreg.toml"
CONFIG_ENV_VAR = "SPECREG_CONFIG"
PATH_ENV_VAR = "SPECREG_PATH"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for specreg.toml.

    Returns the path to the config file, or None if not found.
    Checks SPECREG_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def locate_config(config_path: str | None = None, start: Path | None = None) -> Path | None:
    """The config file to use: *config_path* if it names a file, else walk-up discovery.

    An explicit *config_path* that does not exist means "no config file";
    discovery is not attempted in that case.
    """
    if config_path:
        p = Path(config_path)
        return p if p.is_file() else None
    return find_config(start)


def config_root(toml_path: Path | None) -> Path:
    """Directory relative ``[paths]`` entries are resolved against."""
    return toml_path.parent if toml_path else Path.cwd()


def env_search_paths() -> list[Path]:
    """Directories listed in SPECREG_PATH, resolved against CWD."""
    raw = os.environ.get(PATH_ENV_VAR, "")
    return [Path(entry).resolve() for entry in raw.split(os.pathsep) if entry]


def resolve_search_paths(
    root: Path,
    extra: Iterable[Path] = (),
    configured: Iterable[Path] = (),
) -> list[Path]:
    """Merge the search directories in priority order, without duplicates.

    Relative *extra* and *configured* entries are resolved against *root*.

    Examples:
        >>> paths = resolve_search_paths(Path("/ws"), [Path("/opt")], [Path("m"), Path("/opt")])
        >>> [str(p) for p in paths]
        ['/opt', '/ws/m']
    """
    resolved: list[Path] = []
    for p in [*extra, *configured, *env_search_paths()]:
        path = p if p.is_absolute() else root / p
        if path not in resolved:
            resolved.append(path)
    return resolved
