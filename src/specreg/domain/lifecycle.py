"""Load lifecycle for projects and typekits.

Each named entity moves forward through::

    unrequested -> text_fetched -> parsed -> registered

``registered`` is terminal. A cache hit jumps straight to it; nothing ever
moves backward. A load that fails part-way is forgotten, which leaves the
name ``unrequested`` again.
"""

from __future__ import annotations

from enum import StrEnum


class LoadState(StrEnum):
    """Per-name load state tracked by the loader."""

    UNREQUESTED = "unrequested"
    TEXT_FETCHED = "text_fetched"
    PARSED = "parsed"
    REGISTERED = "registered"


LOAD_TRANSITIONS: dict[str, list[str]] = {
    "unrequested": ["text_fetched"],
    "text_fetched": ["parsed"],
    "parsed": ["registered"],
    "registered": [],
}


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]],
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed


def is_in_flight(state: str) -> bool:
    """Whether a load has started but not yet registered its model."""
    return state in (LoadState.TEXT_FETCHED, LoadState.PARSED)
