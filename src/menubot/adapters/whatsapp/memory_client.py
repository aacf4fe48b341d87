"""ChatClient em memória usado pelos testes (nunca é o binding padrão).

Não fala com servidor algum: o pareamento segue um roteiro de eventos,
mensagens enviadas ficam em ``sent`` e eventos são injetados com ``emit``.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator, Iterable

from menubot.adapters.whatsapp.client import ChatClient, EventHandler
from menubot.domain.events import ChatEvent, PairingEvent, PairingEventKind
from menubot.domain.identity import DeviceIdentity
from menubot.domain.jid import Jid


class InMemoryChatClient(ChatClient):
    """Cliente fake com roteiro de pareamento e falhas configuráveis."""

    def __init__(
        self,
        *,
        pairing_script: Iterable[PairingEvent] = (),
        connect_error: Exception | None = None,
        send_error: Exception | None = None,
    ) -> None:
        self._pairing_script = tuple(pairing_script)
        self._connect_error = connect_error
        self.send_error = send_error
        self._handlers: list[EventHandler] = []
        self._connected = False
        self.identity: DeviceIdentity | None = None
        self.sent: list[tuple[Jid, str]] = []
        self.connect_calls = 0
        self.disconnect_calls = 0

    def attach_identity(self, identity: DeviceIdentity | None) -> None:
        self.identity = identity

    def add_event_handler(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    async def pairing_channel(self) -> AsyncIterator[PairingEvent]:
        for event in self._pairing_script:
            if event.kind is PairingEventKind.SUCCESS and event.identity is not None:
                self.identity = event.identity
            yield event

    async def connect(self) -> None:
        self.connect_calls += 1
        if self._connect_error is not None:
            raise self._connect_error
        self._connected = True

    async def disconnect(self) -> None:
        self.disconnect_calls += 1
        self._connected = False

    async def send_text(self, to: Jid, text: str) -> str:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append((to, text))
        return uuid.uuid4().hex.upper()

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def emit(self, event: ChatEvent) -> None:
        """Entrega um evento a todos os handlers registrados."""
        for handler in self._handlers:
            await handler(event)
