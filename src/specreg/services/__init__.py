"""Service layer — read operations over the loader returning ServiceResult.

Services may import from domain, loaders, and infrastructure layers.
They must never import from commands or output.
"""
