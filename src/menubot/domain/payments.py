"""Notificações de pagamento (ITN PayFast) e contrato do handler."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import StrEnum


@dataclass(slots=True)
class SignatureResult:
    """Resultado da validação de assinatura do ITN."""

    valid: bool
    error: str | None = None


class PaymentStatus(StrEnum):
    """Valores de payment_status enviados pelo gateway."""

    COMPLETE = "COMPLETE"
    FAILED = "FAILED"
    PENDING = "PENDING"
    CANCELLED = "CANCELLED"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True, slots=True)
class PaymentCallback:
    """Callback recebido no /payment_notify, já com resultado da validação."""

    params: tuple[tuple[str, str], ...]
    signature: SignatureResult

    def get(self, name: str) -> str | None:
        for key, value in self.params:
            if key == name:
                return value
        return None

    @property
    def payment_id(self) -> str | None:
        """m_payment_id: referência do pedido no lado do comerciante."""
        return self.get("m_payment_id")

    @property
    def pf_payment_id(self) -> str | None:
        return self.get("pf_payment_id")

    @property
    def merchant_id(self) -> str | None:
        return self.get("merchant_id")

    @property
    def payment_status(self) -> PaymentStatus:
        raw = (self.get("payment_status") or "").upper()
        try:
            return PaymentStatus(raw)
        except ValueError:
            return PaymentStatus.UNKNOWN

    @property
    def amount_gross(self) -> Decimal | None:
        raw = self.get("amount_gross")
        if raw is None:
            return None
        try:
            return Decimal(raw)
        except InvalidOperation:
            return None

    @classmethod
    def from_items(
        cls, items: Sequence[tuple[str, str]], signature: SignatureResult
    ) -> PaymentCallback:
        return cls(params=tuple(items), signature=signature)


class PaymentHandler(ABC):
    """Colaborador que aplica a notificação aceita (atualização de estado)."""

    @abstractmethod
    def handle_notification(self, callback: PaymentCallback) -> None: ...
