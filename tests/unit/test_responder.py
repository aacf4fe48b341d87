"""Testes do motor de conversa padrão."""

from __future__ import annotations

from conftest import CUSTOMER_NUMBER

from menubot.application.responder import PricelistResponder
from menubot.domain.conversation import ConversationContext


def _context(text: str, pricelist, checkout) -> ConversationContext:
    return ConversationContext(
        sender=CUSTOMER_NUMBER, text=text, pricelist=pricelist, checkout=checkout
    )


class TestPricelistResponder:
    def test_free_text_returns_pricelist(self, pricelist, checkout) -> None:
        reply = PricelistResponder().generate_reply(_context("hi there", pricelist, checkout))
        assert reply == pricelist.render()

    def test_number_quotes_selection(self, pricelist, checkout) -> None:
        reply = PricelistResponder().generate_reply(_context(" 2 ", pricelist, checkout))

        assert reply.startswith("Order Blood meal: R0.95 per g.")

    def test_unknown_number_returns_pricelist(self, pricelist, checkout) -> None:
        reply = PricelistResponder().generate_reply(_context("9", pricelist, checkout))
        assert reply == pricelist.render()
