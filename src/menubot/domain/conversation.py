"""Valores por mensagem e contrato do motor de conversa."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from menubot.domain.catalogue import CheckoutInfo, Pricelist


@dataclass(frozen=True, slots=True)
class InboundMessage:
    """Mensagem de texto recebida, já com texto sanitizado."""

    message_id: str
    sender: str
    raw_text: str
    text: str
    timestamp: datetime


@dataclass(frozen=True, slots=True)
class ConversationContext:
    """Entrada de um turno de conversa; descartado após obter a resposta."""

    sender: str
    text: str
    pricelist: Pricelist
    checkout: CheckoutInfo
    auto_increment: bool = False


class ConversationEngine(ABC):
    """Motor de conversa/pedidos: (remetente, texto, pricelist) -> resposta.

    Implementações podem fazer I/O de armazenamento; são chamadas em thread.
    """

    @abstractmethod
    def generate_reply(self, context: ConversationContext) -> str: ...
