"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, specreg.toml only contains overrides.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from specreg.loaders.registry import TaskCollisionPolicy

# --- specreg.toml sections ---


class LoaderConfig(BaseModel):
    """[loader] section."""

    model_config = {"frozen": True}

    define_dummy_types: bool = False
    task_collision: TaskCollisionPolicy = TaskCollisionPolicy.OVERWRITE
    default_typekits: list[str] = Field(default_factory=list)


class PathsConfig(BaseModel):
    """[paths] section.

    Relative entries are resolved against the directory holding specreg.toml.
    """

    model_config = {"frozen": True}

    search: list[Path] = Field(default_factory=list)


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
