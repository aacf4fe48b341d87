"""Dispatcher de mensagens inbound: evento de protocolo -> motor -> resposta.

Fluxo por mensagem de texto:
1. Sanitiza o texto (somente ASCII)
2. Guarda: número host ou modo de teste não chegam ao motor (só o texto é logado)
3. Descarta mensagens antigas (backlog entregue logo após conectar)
4. Chama o motor em thread, com prazo
5. Envia a resposta pelo Session Manager, com prazo

Falhas ficam contidas na mensagem: são logadas e o turno é descartado.
Mensagens do mesmo remetente são processadas em ordem de chegada.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from menubot.adapters.whatsapp.sanitizer import sanitize
from menubot.application.session_manager import SessionManager
from menubot.config.settings import EnvironmentConfig
from menubot.domain.catalogue import CheckoutInfo, Pricelist
from menubot.domain.conversation import ConversationContext, ConversationEngine, InboundMessage
from menubot.domain.events import ChatEvent, TextMessageReceived
from menubot.errors import SendError, SessionNotConnected
from menubot.observability.logging import get_logger, mask_number
from menubot.observability.middleware import bind_correlation_id
from menubot.observability.timing import timed

logger: logging.Logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def _as_utc(timestamp: datetime) -> datetime:
    """Timestamps sem fuso vindos do binding são tratados como UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=UTC)
    return timestamp.astimezone(UTC)


class MessageDispatcher:
    """Observer registrado no Session Manager após o startup."""

    def __init__(
        self,
        config: EnvironmentConfig,
        session: SessionManager,
        engine: ConversationEngine,
        pricelist: Pricelist,
        checkout: CheckoutInfo,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._session = session
        self._engine = engine
        self._pricelist = pricelist
        self._checkout = checkout
        self._clock = clock
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    async def handle_event(self, event: ChatEvent) -> None:
        """Único ponto de entrada; eventos que não são texto são ignorados."""
        if not isinstance(event, TextMessageReceived):
            return

        message = self._to_inbound(event)
        lock = self._lock_for(message.sender)
        async with lock:
            with bind_correlation_id(message.message_id):
                await self._process(message)

    def _to_inbound(self, event: TextMessageReceived) -> InboundMessage:
        return InboundMessage(
            message_id=event.message_id,
            sender=event.sender.number,
            raw_text=event.text,
            text=sanitize(event.text),
            timestamp=_as_utc(event.timestamp),
        )

    def _lock_for(self, sender: str) -> asyncio.Lock:
        lock = self._locks.get(sender)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[sender] = lock
        return lock

    def _is_stale(self, message: InboundMessage) -> bool:
        age = self._clock() - message.timestamp
        return age > timedelta(seconds=self._config.stale_message_seconds)

    async def _process(self, message: InboundMessage) -> None:
        sender_masked = mask_number(message.sender)

        if message.sender == self._config.host_number or self._config.test_mode:
            logger.info(
                "inbound_message_not_forwarded",
                extra={
                    "sender": sender_masked,
                    "reason": "test_mode" if self._config.test_mode else "host_number",
                    "text": message.text,
                },
            )
            return

        if self._is_stale(message):
            logger.info(
                "stale_message_dropped",
                extra={"sender": sender_masked, "timestamp": message.timestamp.isoformat()},
            )
            return

        reply = await self._generate_reply(message)
        if not reply:
            logger.info("empty_reply_skipped", extra={"sender": sender_masked})
            return

        await self._send_reply(message, reply)

    async def _generate_reply(self, message: InboundMessage) -> str | None:
        context = ConversationContext(
            sender=message.sender,
            text=message.text,
            pricelist=self._pricelist,
            checkout=self._checkout,
            auto_increment=self._config.auto_increment,
        )
        try:
            with timed("conversation_engine"):
                async with asyncio.timeout(self._config.engine_timeout_seconds):
                    return await asyncio.to_thread(self._engine.generate_reply, context)
        except TimeoutError:
            logger.error(
                "conversation_engine_timeout",
                extra={"timeout_seconds": self._config.engine_timeout_seconds},
            )
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "conversation_engine_failed",
                extra={"error_type": type(exc).__name__, "error": str(exc)},
            )
        return None

    async def _send_reply(self, message: InboundMessage, reply: str) -> None:
        sender_masked = mask_number(message.sender)
        try:
            async with asyncio.timeout(self._config.send_timeout_seconds):
                sent_id = await self._session.send_text(message.sender, reply)
        except TimeoutError:
            logger.error(
                "reply_send_timeout",
                extra={
                    "sender": sender_masked,
                    "timeout_seconds": self._config.send_timeout_seconds,
                },
            )
        except (SendError, SessionNotConnected) as exc:
            logger.error(
                "reply_send_failed",
                extra={
                    "sender": sender_masked,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
        else:
            logger.info(
                "reply_sent",
                extra={"sender": sender_masked, "message_id": sent_id, "reply_length": len(reply)},
            )
