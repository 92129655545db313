"""specreg — lazy model registry for component specifications."""

__version__ = "0.1.0"
