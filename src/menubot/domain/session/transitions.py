"""Tabela de transições do FSM da sessão.

- TRANSITIONS[(current_state, event)] = next_state
- Estados terminais não aparecem como origem
- Validação pura: sem side effects
"""

from __future__ import annotations

from menubot.domain.session.events import SessionEvent
from menubot.domain.session.states import TERMINAL_STATES, SessionState

TRANSITIONS: dict[tuple[SessionState, SessionEvent], SessionState] = {
    # === UNPAIRED → ... ===
    (SessionState.UNPAIRED, SessionEvent.DEVICE_LOADED): SessionState.PAIRED,
    (SessionState.UNPAIRED, SessionEvent.DEVICE_MISSING): SessionState.AWAITING_QR,
    (SessionState.UNPAIRED, SessionEvent.SHUTDOWN): SessionState.TERMINATED,
    # === AWAITING_QR → ... ===
    (SessionState.AWAITING_QR, SessionEvent.PAIR_SUCCESS): SessionState.PAIRED,
    (SessionState.AWAITING_QR, SessionEvent.PAIR_FAILED): SessionState.TERMINATED,
    (SessionState.AWAITING_QR, SessionEvent.SHUTDOWN): SessionState.TERMINATED,
    # === PAIRED → ... ===
    (SessionState.PAIRED, SessionEvent.CONNECT_SUCCESS): SessionState.CONNECTED,
    (SessionState.PAIRED, SessionEvent.CONNECT_FAILED): SessionState.TERMINATED,
    (SessionState.PAIRED, SessionEvent.CONNECTION_LOST): SessionState.DISCONNECTED,
    (SessionState.PAIRED, SessionEvent.SHUTDOWN): SessionState.TERMINATED,
    # === CONNECTED → ... ===
    (SessionState.CONNECTED, SessionEvent.CONNECTION_LOST): SessionState.DISCONNECTED,
    (SessionState.CONNECTED, SessionEvent.SHUTDOWN): SessionState.TERMINATED,
    # === DISCONNECTED / TERMINATED: sem transições de saída ===
}


def validate_transition(
    current_state: SessionState, event: SessionEvent
) -> tuple[bool, SessionState | None, str]:
    """Valida se uma transição é permitida.

    Retorna:
    - (True, next_state, ""): transição válida
    - (False, None, motivo): transição inválida

    Nunca lança exceção; apenas valida.
    """
    if current_state in TERMINAL_STATES:
        return False, None, f"Terminal state {current_state} has no transitions"

    next_state = TRANSITIONS.get((current_state, event))
    if next_state is None:
        return False, None, f"No transition from {current_state} on event {event}"

    return True, next_state, ""
