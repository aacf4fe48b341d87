"""Session Manager: ciclo de vida da sessão pareada do cliente de mensagens.

Responsabilidades:
- Carregar identidade persistida ou conduzir o pareamento (canal finito)
- Conectar (sem retry) e registrar um único observer de eventos
- Converter perda de conexão em estado DISCONNECTED com motivo explícito
- Enviar mensagens de texto enquanto CONNECTED
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from menubot.adapters.whatsapp.client import ChatClient
from menubot.adapters.whatsapp.pairing_display import PairingDisplay
from menubot.domain.events import (
    CONNECTION_LOSS_EVENTS,
    ChatEvent,
    LoggedOut,
    PairingEvent,
    PairingEventKind,
    describe_connection_loss,
)
from menubot.domain.identity import DeviceIdentity
from menubot.domain.jid import user_jid
from menubot.domain.session import TERMINAL_STATES, SessionEvent, SessionState, validate_transition
from menubot.errors import (
    DeviceStoreError,
    InvalidSessionTransition,
    ObserverAlreadyRegistered,
    PairingCancelled,
    PairingFailed,
    SendError,
    SessionConnectError,
    SessionNotConnected,
)
from menubot.infra.device_store import DeviceStore
from menubot.observability.logging import get_logger, mask_number

logger: logging.Logger = get_logger(__name__)

EventObserver = Callable[[ChatEvent], Awaitable[None]]


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class SessionStatus:
    """Snapshot do estado da sessão (usado pelo /health)."""

    state: SessionState
    device_number: str | None
    disconnect_reason: str | None
    changed_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "device": self.device_number,
            "disconnect_reason": self.disconnect_reason,
            "changed_at": self.changed_at.isoformat(),
        }


async def _next_pairing_event(channel: AsyncIterator[PairingEvent]) -> PairingEvent:
    return await anext(channel)


class SessionManager:
    """Dono único do ChatClient; todas as transições passam pela tabela do FSM."""

    def __init__(self, client: ChatClient, *, pairing_timeout_seconds: float = 180.0) -> None:
        self._client = client
        self._pairing_timeout = pairing_timeout_seconds
        self._state = SessionState.UNPAIRED
        self._changed_at = _utcnow()
        self._identity: DeviceIdentity | None = None
        self._store: DeviceStore | None = None
        self._disconnect_reason: str | None = None
        self._loss_during_pairing: ChatEvent | None = None
        self._pairing_started = False
        self._observer: EventObserver | None = None
        self._buffer: list[ChatEvent] = []
        self._tasks: set[asyncio.Task[None]] = set()
        client.add_event_handler(self._on_client_event)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def identity(self) -> DeviceIdentity | None:
        return self._identity

    @property
    def disconnect_reason(self) -> str | None:
        return self._disconnect_reason

    def status(self) -> SessionStatus:
        number = self._identity.jid.number if self._identity else None
        return SessionStatus(
            state=self._state,
            device_number=mask_number(number),
            disconnect_reason=self._disconnect_reason,
            changed_at=self._changed_at,
        )

    def _transition(self, event: SessionEvent) -> SessionState:
        is_valid, next_state, error = validate_transition(self._state, event)
        if not is_valid or next_state is None:
            raise InvalidSessionTransition(error)

        previous = self._state
        self._state = next_state
        self._changed_at = _utcnow()
        logger.info(
            "session_transition",
            extra={
                "from_state": previous.value,
                "to_state": next_state.value,
                "event": event.value,
            },
        )
        return next_state

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    def initialize(self, store: DeviceStore) -> SessionState:
        """Carrega a identidade persistida: PAIRED se existe, AWAITING_QR se não.

        Raises:
            DeviceStoreError: falha do backend (fatal no startup)
        """
        identity = store.load()
        self._transition(
            SessionEvent.DEVICE_LOADED if identity is not None else SessionEvent.DEVICE_MISSING
        )
        self._store = store
        self._identity = identity
        self._client.attach_identity(identity)
        return self._state

    async def start_pairing(self, display: PairingDisplay, cancel: asyncio.Event) -> DeviceIdentity:
        """Conduz o pareamento até CONNECTED ou falha terminal.

        Raises:
            InvalidSessionTransition: sessão não aguarda pareamento ou canal já consumido
            SessionConnectError: cliente não conectou para receber os códigos
            PairingFailed: timeout/erro do canal, canal encerrado ou prazo esgotado
            PairingCancelled: sinal de término recebido durante o pareamento
        """
        if self._pairing_started:
            raise InvalidSessionTransition("Pairing channel is not restartable")
        if self._state is not SessionState.AWAITING_QR:
            raise InvalidSessionTransition(f"Cannot pair from state {self._state}")
        self._pairing_started = True

        channel = self._client.pairing_channel()
        try:
            await self._client.connect()
        except Exception as exc:  # noqa: BLE001
            self._transition(SessionEvent.PAIR_FAILED)
            raise SessionConnectError(f"Connect for pairing failed: {exc}") from exc

        cancel_wait = asyncio.create_task(cancel.wait())
        try:
            async with asyncio.timeout(self._pairing_timeout):
                result = await self._consume_pairing(channel, display, cancel_wait)
        except TimeoutError:
            result = "pairing_deadline_exceeded"
        finally:
            cancel_wait.cancel()
            aclose = getattr(channel, "aclose", None)
            if aclose is not None:
                await aclose()

        if isinstance(result, DeviceIdentity):
            return result
        if result == "cancelled":
            self._transition(SessionEvent.SHUTDOWN)
            await self._close_client()
            raise PairingCancelled("Pairing interrupted by shutdown signal")

        self._transition(SessionEvent.PAIR_FAILED)
        logger.error("pairing_failed", extra={"reason": result})
        await self._close_client()
        raise PairingFailed(result)

    async def _consume_pairing(
        self,
        channel: AsyncIterator[PairingEvent],
        display: PairingDisplay,
        cancel_wait: asyncio.Task[Any],
    ) -> DeviceIdentity | str:
        """Consome o canal; retorna a identidade ou o motivo da falha."""
        codes_seen = 0
        while True:
            next_event = asyncio.create_task(_next_pairing_event(channel))
            try:
                await asyncio.wait({next_event, cancel_wait}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                if not next_event.done():
                    next_event.cancel()
                    await asyncio.gather(next_event, return_exceptions=True)

            if cancel_wait.done():
                return "cancelled"

            try:
                event = next_event.result()
            except StopAsyncIteration:
                return "channel_closed_without_result"
            except asyncio.CancelledError:
                return "channel_cancelled"
            except Exception as exc:  # noqa: BLE001
                return f"channel_error:{type(exc).__name__}"

            if event.kind is PairingEventKind.CODE:
                codes_seen += 1
                logger.info("pairing_code_received", extra={"sequence": codes_seen})
                display.show_code(event.code or "")
                continue

            if event.kind is PairingEventKind.SUCCESS:
                if event.identity is None:
                    return "success_without_identity"
                return self._complete_pairing(event.identity)

            if event.kind is PairingEventKind.TIMEOUT:
                return "pairing_timeout"
            return f"pairing_error:{event.error or 'unknown'}"

    def _complete_pairing(self, identity: DeviceIdentity) -> DeviceIdentity:
        """Persiste a identidade e segue para CONNECTED.

        Se a conexão caiu durante o pareamento, a sessão termina em DISCONNECTED
        com o motivo registrado; LoggedOut invalida a identidade recém-emitida.
        """
        lost = self._loss_during_pairing
        if self._store is not None and not isinstance(lost, LoggedOut):
            self._store.save(identity)
        self._identity = identity
        self._client.attach_identity(identity)
        self._transition(SessionEvent.PAIR_SUCCESS)
        logger.info("pairing_succeeded", extra={"device": mask_number(identity.jid.number)})

        if lost is not None:
            self._mark_disconnected(lost)
        else:
            self._transition(SessionEvent.CONNECT_SUCCESS)
        return identity

    async def connect(self) -> None:
        """Conecta uma sessão já pareada (sem retry).

        Raises:
            SessionConnectError: cliente falhou ao conectar
        """
        if self._state is not SessionState.PAIRED:
            raise InvalidSessionTransition(f"Cannot connect from state {self._state}")
        try:
            await self._client.connect()
        except Exception as exc:  # noqa: BLE001
            self._transition(SessionEvent.CONNECT_FAILED)
            raise SessionConnectError(f"Connect failed: {exc}") from exc

        if self._state is SessionState.DISCONNECTED:
            raise SessionConnectError(
                f"Connection lost while connecting: {self._disconnect_reason}"
            )
        self._transition(SessionEvent.CONNECT_SUCCESS)

    # ------------------------------------------------------------------
    # Eventos
    # ------------------------------------------------------------------

    def register_observer(self, observer: EventObserver) -> None:
        """Registra o único observer e entrega o buffer na ordem de chegada."""
        if self._observer is not None:
            raise ObserverAlreadyRegistered("An event observer is already registered")
        self._observer = observer

        buffered, self._buffer = self._buffer, []
        if buffered:
            logger.info("buffered_events_flushed", extra={"count": len(buffered)})
        for event in buffered:
            self._spawn(event)

    async def _on_client_event(self, event: ChatEvent) -> None:
        if isinstance(event, CONNECTION_LOSS_EVENTS):
            self._handle_connection_loss(event)

        if self._observer is None:
            self._buffer.append(event)
            return
        self._spawn(event)

    def _spawn(self, event: ChatEvent) -> None:
        task = asyncio.create_task(self._deliver(event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _deliver(self, event: ChatEvent) -> None:
        observer = self._observer
        if observer is None:
            return
        try:
            await observer(event)
        except Exception:  # noqa: BLE001
            logger.exception("event_observer_failed", extra={"event_type": type(event).__name__})

    def _handle_connection_loss(self, event: ChatEvent) -> None:
        reason = describe_connection_loss(event)
        if self._state is SessionState.AWAITING_QR and self._pairing_started:
            # Aplicada quando o canal de pareamento entregar o resultado
            if self._loss_during_pairing is None:
                self._loss_during_pairing = event
            logger.warning("connection_lost_during_pairing", extra={"reason": reason})
            return
        if self._state not in (SessionState.PAIRED, SessionState.CONNECTED):
            logger.warning(
                "connection_event_ignored",
                extra={"state": self._state.value, "reason": reason},
            )
            return
        self._mark_disconnected(event)

    def _mark_disconnected(self, event: ChatEvent) -> None:
        reason = describe_connection_loss(event)
        self._disconnect_reason = reason
        self._transition(SessionEvent.CONNECTION_LOST)
        logger.error("session_disconnected", extra={"reason": reason})

        if isinstance(event, LoggedOut) and self._store is not None:
            try:
                self._store.delete()
            except DeviceStoreError:
                logger.exception("device_identity_delete_failed")

    # ------------------------------------------------------------------
    # Envio / encerramento
    # ------------------------------------------------------------------

    async def send_text(self, number: str, text: str) -> str:
        """Envia texto para ``<number>@s.whatsapp.net``; retorna o id da mensagem.

        Raises:
            SessionNotConnected: sessão fora de CONNECTED
            SendError: falha do cliente ao enviar
        """
        if self._state is not SessionState.CONNECTED:
            raise SessionNotConnected(f"Session is {self._state}")
        try:
            return await self._client.send_text(user_jid(number), text)
        except Exception as exc:  # noqa: BLE001
            raise SendError(f"Send failed: {exc}") from exc

    async def disconnect(self) -> None:
        """Encerra a sessão (idempotente) e cancela entregas pendentes."""
        if self._state not in TERMINAL_STATES:
            self._transition(SessionEvent.SHUTDOWN)

        pending = [task for task in self._tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        await self._close_client()

    async def _close_client(self) -> None:
        if not self._client.is_connected:
            return
        try:
            await self._client.disconnect()
        except Exception:  # noqa: BLE001
            logger.exception("client_disconnect_failed")
