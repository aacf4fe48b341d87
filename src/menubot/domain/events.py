"""Eventos emitidos pelo cliente de mensagens.

ChatEvent é a união fechada dos tipos que o Session Manager repassa ao
observer. Consumidores despacham por isinstance e ignoram o que não tratam.
PairingEvent pertence ao canal finito de pareamento (não passa pelo observer).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

from menubot.domain.identity import DeviceIdentity
from menubot.domain.jid import Jid


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


# -----------------------------------------------------------------------------
# Eventos de protocolo (entregues ao observer)
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TextMessageReceived:
    """Mensagem de texto recebida."""

    message_id: str
    sender: Jid
    text: str
    timestamp: datetime = field(default_factory=_utcnow)
    chat: Jid | None = None
    push_name: str | None = None
    is_from_me: bool = False


@dataclass(frozen=True, slots=True)
class ReceiptReceived:
    """Recibo de entrega/leitura de mensagens enviadas."""

    message_ids: tuple[str, ...]
    sender: Jid
    receipt_type: str = "delivered"


@dataclass(frozen=True, slots=True)
class Connected:
    """Conexão com o servidor estabelecida."""


@dataclass(frozen=True, slots=True)
class Disconnected:
    """Conexão encerrada pelo servidor ou pela rede."""

    reason: str = "connection_closed"


@dataclass(frozen=True, slots=True)
class LoggedOut:
    """Credencial revogada/expirada; o dispositivo precisa parear de novo."""

    reason: str = "logged_out"


@dataclass(frozen=True, slots=True)
class StreamReplaced:
    """Outra instância abriu sessão com a mesma identidade."""


@dataclass(frozen=True, slots=True)
class TemporaryBan:
    """Conta temporariamente bloqueada pelo servidor."""

    code: str = "unknown"
    expires_in_seconds: int | None = None


@dataclass(frozen=True, slots=True)
class KeepAliveTimeout:
    """Keep-alive sem resposta; conexão considerada perdida."""

    error_count: int = 1


ChatEvent = (
    TextMessageReceived
    | ReceiptReceived
    | Connected
    | Disconnected
    | LoggedOut
    | StreamReplaced
    | TemporaryBan
    | KeepAliveTimeout
)

CONNECTION_LOSS_EVENTS: tuple[type, ...] = (
    Disconnected,
    LoggedOut,
    StreamReplaced,
    TemporaryBan,
    KeepAliveTimeout,
)


def describe_connection_loss(event: ChatEvent) -> str:
    """Motivo legível (snake_case) de uma perda de conexão."""
    if isinstance(event, LoggedOut):
        return f"logged_out:{event.reason}"
    if isinstance(event, Disconnected):
        return f"disconnected:{event.reason}"
    if isinstance(event, StreamReplaced):
        return "stream_replaced"
    if isinstance(event, TemporaryBan):
        return f"temporary_ban:{event.code}"
    if isinstance(event, KeepAliveTimeout):
        return f"keepalive_timeout:{event.error_count}"
    return type(event).__name__


# -----------------------------------------------------------------------------
# Canal de pareamento
# -----------------------------------------------------------------------------


class PairingEventKind(StrEnum):
    """Tipos de evento do canal de pareamento."""

    CODE = "code"
    SUCCESS = "success"
    TIMEOUT = "timeout"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class PairingEvent:
    """Evento do canal finito de pareamento."""

    kind: PairingEventKind
    code: str | None = None
    identity: DeviceIdentity | None = None
    error: str | None = None
