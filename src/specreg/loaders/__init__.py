"""Loader layer — lazy loading, caching, and cross-referencing of models.

The loader layer may import from domain and, for its default builders,
infrastructure. It must never import from services, commands, or output.
"""

from specreg.loaders.backend import Backend
from specreg.loaders.callbacks import CallbackList
from specreg.loaders.loader import Loader
from specreg.loaders.registry import ModelRegistry, TaskCollisionPolicy
from specreg.loaders.resolver import TypeResolver

__all__ = [
    "Backend",
    "CallbackList",
    "Loader",
    "ModelRegistry",
    "TaskCollisionPolicy",
    "TypeResolver",
]
