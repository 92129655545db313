"""Domain layer — type definitions, projects, typekits, and errors.

This layer depends only on stdlib, pydantic, and networkx.
It must never import from loaders, services, infrastructure, commands, or config.
"""
