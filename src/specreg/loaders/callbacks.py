"""Ordered observer lists for load events.

INVARIANT: Each dispatch calls every handler subscribed at the moment the
dispatch starts, exactly once, in subscription order.

Replay-on-subscribe iterates a snapshot taken before the first handler
call, so models registered by reentrant loads during the replay are not
replayed a second time by the same call; the handler sees those through
regular dispatch instead.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Any

type LoadHandler = Callable[[Any], object]


class CallbackList:
    """Ordered list of load handlers with replay-on-subscribe."""

    def __init__(self) -> None:
        self._handlers: list[LoadHandler] = []

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[LoadHandler]:
        return iter(list(self._handlers))

    def subscribe(self, handler: LoadHandler, replay: Iterable[Any] = ()) -> LoadHandler:
        """Append *handler*, then call it once per model in *replay*.

        Returns *handler* so that the method can be used as a decorator.
        """
        self._handlers.append(handler)
        for model in list(replay):
            handler(model)
        return handler

    def dispatch(self, model: Any) -> None:
        """Call every current handler with *model*."""
        for handler in list(self._handlers):
            handler(model)
