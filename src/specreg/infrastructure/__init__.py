"""Infrastructure layer — backends, bundled builders, and the workspace.

This layer depends on stdlib and third-party libs (ruamel.yaml).
It may import from domain and loaders, never from services, commands,
or output.
"""
