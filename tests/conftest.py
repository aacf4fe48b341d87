from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path

import pytest

from menubot.adapters.whatsapp.memory_client import InMemoryChatClient
from menubot.adapters.whatsapp.pairing_display import PairingDisplay
from menubot.application.catalogue import build_checkout_info
from menubot.config.settings import REQUIRED_VARIABLES, EnvironmentConfig, load_config
from menubot.domain.catalogue import CatalogueItem, CheckoutInfo, Pricelist, compose_selections
from menubot.domain.conversation import ConversationContext, ConversationEngine
from menubot.domain.events import TextMessageReceived
from menubot.domain.identity import DeviceIdentity
from menubot.domain.jid import Jid, user_jid
from menubot.domain.payments import PaymentCallback, PaymentHandler

REPO_ROOT = Path(__file__).resolve().parents[1]

HOST_NUMBER = "27820000000"
CUSTOMER_NUMBER = "27831234567"

REQUIRED_VALUES: dict[str, str] = {
    "database_url": "sqlite://",
    "host_number": HOST_NUMBER,
    "home_base_url": "https://shop.example.com/",
    "merchant_id": "10000100",
    "merchant_key": "46f0cd694581a",
    "passphrase": "jt7NOE43FZPn",
    "pf_host": "sandbox.payfast.co.za",
    "chat_client_factory": "conftest:make_chat_client",
}


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isola os testes de variáveis reais do ambiente."""
    for name in REQUIRED_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    for name in ("TEST_MODE", "LOG_FORMAT", "WORKING_DIR"):
        monkeypatch.delenv(name, raising=False)


def make_config(**overrides) -> EnvironmentConfig:
    values = {**REQUIRED_VALUES, "working_dir": REPO_ROOT, **overrides}
    return load_config(_env_file=None, **values)


def make_chat_client(config: EnvironmentConfig) -> InMemoryChatClient:
    """Binding configurado nos testes: cliente sem roteiro de pareamento."""
    return InMemoryChatClient()


@pytest.fixture()
def config() -> EnvironmentConfig:
    return make_config()


@pytest.fixture()
def pricelist() -> Pricelist:
    items = (
        CatalogueItem(item_id="bone", name="Bone meal", unit_price=Decimal("1.20")),
        CatalogueItem(item_id="blood", name="Blood meal", unit_price=Decimal("0.95")),
    )
    return Pricelist(
        preamble="All fertilizer quoted per gram.", catalogue=compose_selections(items)
    )


@pytest.fixture()
def checkout(config: EnvironmentConfig) -> CheckoutInfo:
    return build_checkout_info(config)


@pytest.fixture()
def identity() -> DeviceIdentity:
    return DeviceIdentity(jid=Jid.parse(f"{HOST_NUMBER}:7@s.whatsapp.net"), push_name="Shop")


class RecordingDisplay(PairingDisplay):
    """Display que apenas guarda os códigos recebidos."""

    def __init__(self, on_code=None) -> None:
        self.codes: list[str] = []
        self._on_code = on_code

    def show_code(self, code: str) -> None:
        self.codes.append(code)
        if self._on_code is not None:
            self._on_code(code)


class RecordingEngine(ConversationEngine):
    """Motor fake: devolve ``reply`` (ou o próprio texto) e guarda os contextos."""

    def __init__(self, reply: str | None = None, error: Exception | None = None) -> None:
        self.contexts: list[ConversationContext] = []
        self._reply = reply
        self._error = error

    def generate_reply(self, context: ConversationContext) -> str:
        self.contexts.append(context)
        if self._error is not None:
            raise self._error
        return self._reply if self._reply is not None else f"echo:{context.text}"


class RecordingPaymentHandler(PaymentHandler):
    def __init__(self, error: Exception | None = None, delay: float = 0.0) -> None:
        self.received: list[PaymentCallback] = []
        self._error = error
        self._delay = delay

    def handle_notification(self, callback: PaymentCallback) -> None:
        if self._delay:
            import time

            time.sleep(self._delay)
        if self._error is not None:
            raise self._error
        self.received.append(callback)


def text_message(
    text: str,
    *,
    number: str = CUSTOMER_NUMBER,
    message_id: str = "3EB0C767D26A1D8B",
    timestamp: datetime | None = None,
) -> TextMessageReceived:
    return TextMessageReceived(
        message_id=message_id,
        sender=Jid.parse(f"{number}:12@s.whatsapp.net"),
        text=text,
        timestamp=timestamp or datetime.now(tz=UTC),
        chat=user_jid(number),
    )


async def drain(rounds: int = 10) -> None:
    """Deixa tasks agendadas no loop rodarem."""
    for _ in range(rounds):
        await asyncio.sleep(0)
