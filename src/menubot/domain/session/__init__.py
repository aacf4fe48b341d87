"""FSM da sessão pareada: estados, eventos e transições.

Exporta:
- SessionState: 6 estados
- SessionEvent: eventos de ciclo de vida
- validate_transition: validador puro
"""

from menubot.domain.session.events import SessionEvent
from menubot.domain.session.states import TERMINAL_STATES, SessionState
from menubot.domain.session.transitions import TRANSITIONS, validate_transition

__all__ = [
    "SessionState",
    "SessionEvent",
    "validate_transition",
    "TRANSITIONS",
    "TERMINAL_STATES",
]
