"""Adapter do cliente de mensagens WhatsApp."""

from menubot.adapters.whatsapp.client import ChatClient, EventHandler, resolve_client_factory
from menubot.adapters.whatsapp.memory_client import InMemoryChatClient
from menubot.adapters.whatsapp.pairing_display import PairingDisplay, TerminalPairingDisplay
from menubot.adapters.whatsapp.sanitizer import sanitize

__all__ = [
    "ChatClient",
    "EventHandler",
    "resolve_client_factory",
    "InMemoryChatClient",
    "PairingDisplay",
    "TerminalPairingDisplay",
    "sanitize",
]
