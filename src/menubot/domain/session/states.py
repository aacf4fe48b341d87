"""Estados da sessão do cliente de mensagens.

Progressão monotônica:
UNPAIRED → AWAITING_QR → PAIRED → CONNECTED → DISCONNECTED/TERMINATED.
Reconexão (DISCONNECTED → CONNECTED) não existe.
"""

from __future__ import annotations

from enum import StrEnum


class SessionState(StrEnum):
    """6 estados da sessão pareada."""

    UNPAIRED = "UNPAIRED"
    """Sessão criada; identidade do dispositivo ainda não consultada."""

    AWAITING_QR = "AWAITING_QR"
    """Sem identidade persistida; aguardando leitura do código de pareamento."""

    PAIRED = "PAIRED"
    """Identidade disponível (carregada ou recém-pareada), ainda sem conexão."""

    CONNECTED = "CONNECTED"
    """Conectado ao servidor; eventos de protocolo fluem para o observer."""

    DISCONNECTED = "DISCONNECTED"
    """Conexão perdida após o startup (motivo explícito em disconnect_reason)."""

    TERMINATED = "TERMINATED"
    """Encerrada por shutdown ou falha de pareamento/conexão."""


TERMINAL_STATES = frozenset({
    SessionState.DISCONNECTED,
    SessionState.TERMINATED,
})
"""Estados sem transições de saída."""
