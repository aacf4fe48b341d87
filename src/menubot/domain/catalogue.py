"""Catálogo, pricelist e dados de checkout (somente leitura após o startup)."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class CatalogueItem:
    """Item de catálogo com preço unitário."""

    item_id: str
    name: str
    unit_price: Decimal
    unit: str = "g"
    description: str | None = None


@dataclass(frozen=True, slots=True)
class CatalogueSelection:
    """Item numerado para o usuário escolher por mensagem."""

    number: int
    item: CatalogueItem

    def render(self) -> str:
        return f"{self.number}) {self.item.name} - R{self.item.unit_price:.2f}/{self.item.unit}"


@dataclass(frozen=True, slots=True)
class Pricelist:
    """Pricelist composto no startup e compartilhado por todas as conversas."""

    preamble: str
    catalogue: tuple[CatalogueSelection, ...] = ()

    def find(self, number: int) -> CatalogueSelection | None:
        """Seleção pelo número exibido ao usuário (ou None)."""
        for selection in self.catalogue:
            if selection.number == number:
                return selection
        return None

    def render(self) -> str:
        """Texto do pricelist para envio via WhatsApp."""
        lines = [self.preamble] if self.preamble else []
        lines.extend(selection.render() for selection in self.catalogue)
        return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class CheckoutInfo:
    """Dados de checkout PayFast usados pelo motor de conversa."""

    return_url: str
    cancel_url: str
    notify_url: str
    merchant_id: str
    merchant_key: str
    passphrase: str
    host_url: str
    item_name_prefix: str

    def __repr__(self) -> str:
        # Nunca expor merchant_key/passphrase em logs
        return (
            f"CheckoutInfo(return_url={self.return_url!r}, cancel_url={self.cancel_url!r}, "
            f"notify_url={self.notify_url!r}, merchant_id={self.merchant_id!r}, "
            f"host_url={self.host_url!r})"
        )


def compose_selections(items: Iterable[CatalogueItem]) -> tuple[CatalogueSelection, ...]:
    """Numera itens a partir de 1, na ordem em que o catálogo os devolve."""
    return tuple(
        CatalogueSelection(number=index, item=item) for index, item in enumerate(items, start=1)
    )
