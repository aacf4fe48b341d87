"""Testes da tabela de transições da sessão."""

from __future__ import annotations

import pytest

from menubot.domain.session import (
    TERMINAL_STATES,
    TRANSITIONS,
    SessionEvent,
    SessionState,
    validate_transition,
)


class TestSessionTransitions:
    """Progressão monotônica, sem reconexão."""

    @pytest.mark.parametrize(
        ("state", "event", "expected"),
        [
            (SessionState.UNPAIRED, SessionEvent.DEVICE_LOADED, SessionState.PAIRED),
            (SessionState.UNPAIRED, SessionEvent.DEVICE_MISSING, SessionState.AWAITING_QR),
            (SessionState.AWAITING_QR, SessionEvent.PAIR_SUCCESS, SessionState.PAIRED),
            (SessionState.AWAITING_QR, SessionEvent.PAIR_FAILED, SessionState.TERMINATED),
            (SessionState.PAIRED, SessionEvent.CONNECT_SUCCESS, SessionState.CONNECTED),
            (SessionState.PAIRED, SessionEvent.CONNECT_FAILED, SessionState.TERMINATED),
            (SessionState.CONNECTED, SessionEvent.CONNECTION_LOST, SessionState.DISCONNECTED),
            (SessionState.CONNECTED, SessionEvent.SHUTDOWN, SessionState.TERMINATED),
        ],
    )
    def test_valid_transitions(
        self, state: SessionState, event: SessionEvent, expected: SessionState
    ) -> None:
        assert validate_transition(state, event) == (True, expected, "")

    def test_no_reconnection_from_disconnected(self) -> None:
        ok, next_state, error = validate_transition(
            SessionState.DISCONNECTED, SessionEvent.CONNECT_SUCCESS
        )
        assert ok is False
        assert next_state is None
        assert "Terminal state" in error

    def test_cannot_skip_pairing(self) -> None:
        ok, _, error = validate_transition(SessionState.AWAITING_QR, SessionEvent.CONNECT_SUCCESS)
        assert ok is False
        assert "No transition" in error

    def test_terminal_states_have_no_outgoing_transitions(self) -> None:
        assert all(state not in TERMINAL_STATES for state, _ in TRANSITIONS)

    def test_every_non_terminal_state_accepts_shutdown(self) -> None:
        for state in SessionState:
            if state in TERMINAL_STATES:
                continue
            ok, next_state, _ = validate_transition(state, SessionEvent.SHUTDOWN)
            assert ok
            assert next_state is SessionState.TERMINATED
