"""Porta do cliente de protocolo de mensagens (sessão pareada por dispositivo).

O binding real do protocolo é escolhido por configuração
(``CHAT_CLIENT_FACTORY="modulo:callable"``); o callable recebe o
EnvironmentConfig e devolve um ChatClient.
"""

from __future__ import annotations

import importlib
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import TYPE_CHECKING

from menubot.domain.events import ChatEvent, PairingEvent
from menubot.domain.identity import DeviceIdentity
from menubot.domain.jid import Jid
from menubot.errors import ConfigurationError

if TYPE_CHECKING:
    from menubot.config.settings import EnvironmentConfig

EventHandler = Callable[[ChatEvent], Awaitable[None]]
ChatClientFactory = Callable[["EnvironmentConfig"], "ChatClient"]


class ChatClient(ABC):
    """Contrato mínimo que o Session Manager usa do cliente de protocolo."""

    @abstractmethod
    def attach_identity(self, identity: DeviceIdentity | None) -> None:
        """Associa a identidade persistida (None = dispositivo novo)."""

    @abstractmethod
    def add_event_handler(self, handler: EventHandler) -> None:
        """Registra o callback que recebe os eventos de protocolo."""

    @abstractmethod
    def pairing_channel(self) -> AsyncIterator[PairingEvent]:
        """Canal finito de pareamento; deve ser obtido antes de connect()."""

    @abstractmethod
    async def connect(self) -> None: ...

    @abstractmethod
    async def disconnect(self) -> None: ...

    @abstractmethod
    async def send_text(self, to: Jid, text: str) -> str:
        """Envia mensagem de texto e retorna o id atribuído."""

    @property
    @abstractmethod
    def is_connected(self) -> bool: ...


def resolve_client_factory(path: str) -> ChatClientFactory:
    """Importa o factory ``modulo:callable`` configurado."""
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        raise ConfigurationError(f"CHAT_CLIENT_FACTORY inválido: {path!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(
            f"CHAT_CLIENT_FACTORY: módulo {module_name!r} não encontrado"
        ) from exc

    factory = getattr(module, attr, None)
    if not callable(factory):
        raise ConfigurationError(
            f"CHAT_CLIENT_FACTORY: {attr!r} não é callable em {module_name!r}"
        )
    return factory
