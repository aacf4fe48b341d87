"""Testes do ChatClient em memória, do factory configurável e do display."""

from __future__ import annotations

import io

import pytest

from menubot.adapters.whatsapp.client import resolve_client_factory
from menubot.adapters.whatsapp.memory_client import InMemoryChatClient
from menubot.adapters.whatsapp.pairing_display import TerminalPairingDisplay
from menubot.domain.events import Connected, PairingEvent, PairingEventKind
from menubot.domain.jid import user_jid
from menubot.errors import ConfigurationError


class TestResolveClientFactory:
    def test_configured_factory_resolves(self, config) -> None:
        factory = resolve_client_factory(config.chat_client_factory)

        assert isinstance(factory(config), InMemoryChatClient)

    def test_missing_module(self) -> None:
        with pytest.raises(ConfigurationError, match="não encontrado"):
            resolve_client_factory("menubot.nope:factory")

    def test_missing_attribute(self) -> None:
        with pytest.raises(ConfigurationError, match="não é callable"):
            resolve_client_factory("menubot.adapters.whatsapp.memory_client:nope")

    def test_malformed_path(self) -> None:
        with pytest.raises(ConfigurationError):
            resolve_client_factory("menubot.adapters.whatsapp.memory_client")


class TestInMemoryChatClient:
    @pytest.mark.asyncio
    async def test_pairing_channel_follows_script(self, identity) -> None:
        client = InMemoryChatClient(
            pairing_script=[
                PairingEvent(PairingEventKind.CODE, "code-1"),
                PairingEvent(PairingEventKind.SUCCESS, identity=identity),
            ]
        )

        events = [event async for event in client.pairing_channel()]

        assert [event.kind for event in events] == [
            PairingEventKind.CODE,
            PairingEventKind.SUCCESS,
        ]
        assert client.identity == identity

    @pytest.mark.asyncio
    async def test_send_records_messages(self) -> None:
        client = InMemoryChatClient()
        await client.connect()

        message_id = await client.send_text(user_jid("27831234567"), "hi")

        assert message_id
        assert client.sent == [(user_jid("27831234567"), "hi")]
        assert client.is_connected

    @pytest.mark.asyncio
    async def test_emit_reaches_handlers(self) -> None:
        client = InMemoryChatClient()
        received = []

        async def handler(event) -> None:
            received.append(event)

        client.add_event_handler(handler)
        await client.emit(Connected())

        assert received == [Connected()]


def test_terminal_display_renders_qr_block() -> None:
    stream = io.StringIO()

    TerminalPairingDisplay(stream=stream).show_code("2@abc,def")

    header, *rows = stream.getvalue().splitlines()
    assert "QR" in header
    assert len(rows) >= 10
    assert len({len(row) for row in rows}) == 1
    assert any(block in "".join(rows) for block in "\u2580\u2584\u2588")
    assert "2@abc,def" not in stream.getvalue()
