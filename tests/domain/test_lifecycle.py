"""Tests for the project/typekit load lifecycle."""

from __future__ import annotations

import pytest

from specreg.domain.lifecycle import (
    LOAD_TRANSITIONS,
    LoadState,
    is_in_flight,
    is_valid_transition,
)


class TestLoadTransitions:
    @pytest.mark.parametrize(
        ("current", "target"),
        [
            ("unrequested", "text_fetched"),
            ("text_fetched", "parsed"),
            ("parsed", "registered"),
        ],
    )
    def test_forward_transitions_allowed(self, current: str, target: str) -> None:
        assert is_valid_transition(current, target, LOAD_TRANSITIONS)

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            ("unrequested", "parsed"),
            ("parsed", "text_fetched"),
            ("registered", "unrequested"),
            ("registered", "text_fetched"),
        ],
    )
    def test_skips_and_backward_moves_rejected(self, current: str, target: str) -> None:
        assert not is_valid_transition(current, target, LOAD_TRANSITIONS)

    def test_registered_is_terminal(self) -> None:
        assert LOAD_TRANSITIONS["registered"] == []

    def test_every_state_has_an_entry(self) -> None:
        assert set(LOAD_TRANSITIONS) == {s.value for s in LoadState}


class TestInFlight:
    def test_in_flight_states(self) -> None:
        assert is_in_flight(LoadState.TEXT_FETCHED)
        assert is_in_flight(LoadState.PARSED)

    def test_settled_states(self) -> None:
        assert not is_in_flight(LoadState.UNREQUESTED)
        assert not is_in_flight(LoadState.REGISTERED)
