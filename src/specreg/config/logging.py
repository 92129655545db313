"""structlog configuration for specreg.

Two output modes:
- Human (default): colored console output to stderr
- JSON (--log-json): Structured JSON lines to stderr

Library modules log through stdlib ``logging.getLogger(__name__)``; the
formatter installed here renders those records through structlog too.

Loads nest: building a project loads its task libraries, which load their
typekits. :func:`load_context` tracks the chain of in-flight loads in a
ContextVar, and every record emitted inside one carries it as ``loading``
(e.g. ``project:demo > project:base > typekit:base``).
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Generator, MutableMapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

import structlog

# Loggers that trace model loading: the loader, registry and resolver, and
# the backends and builders they call.
LOAD_LOGGERS = ("specreg.loaders", "specreg.infrastructure")

_load_chain: ContextVar[tuple[str, ...]] = ContextVar("_load_chain", default=())


@contextmanager
def load_context(kind: str, name: str) -> Generator[None]:
    """Mark the load of *kind* *name* as in flight for the enclosed block."""
    token = _load_chain.set((*_load_chain.get(), f"{kind}:{name}"))
    try:
        yield
    finally:
        _load_chain.reset(token)


def current_load_chain() -> tuple[str, ...]:
    """Loads in flight, outermost first."""
    return _load_chain.get()


def add_load_chain(
    _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor adding the in-flight load chain as ``loading``."""
    chain = _load_chain.get()
    if chain:
        event_dict.setdefault("loading", " > ".join(chain))
    return event_dict


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    trace_loads: bool = False,
) -> None:
    """Configure structlog processors and output routing.

    Args:
        verbose: Enable DEBUG-level output. When False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
        trace_loads: Enable DEBUG-level output for :data:`LOAD_LOGGERS`
            only, leaving the rest of specreg at its normal level.
    """
    specreg_level = logging.DEBUG if verbose else logging.WARNING

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_load_chain,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("specreg").setLevel(specreg_level)
    for name in LOAD_LOGGERS:
        # NOTSET defers to the "specreg" logger level set above.
        logging.getLogger(name).setLevel(logging.DEBUG if trace_loads else logging.NOTSET)
