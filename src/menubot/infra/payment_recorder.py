"""Registro das notificações de pagamento aceitas."""

from __future__ import annotations

import json
from datetime import UTC, datetime

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Engine

from menubot.domain.payments import PaymentCallback, PaymentHandler
from menubot.infra.schema import payment_notifications
from menubot.observability.logging import get_logger

logger = get_logger(__name__)


class SqlPaymentRecorder(PaymentHandler):
    """Grava/atualiza o último status por ``pf_payment_id``.

    Notificações repetidas do gateway atualizam a mesma linha.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def handle_notification(self, callback: PaymentCallback) -> None:
        key = callback.pf_payment_id or callback.payment_id
        if not key:
            raise ValueError("notification has neither pf_payment_id nor m_payment_id")

        now = datetime.now(tz=UTC).isoformat()
        amount = callback.amount_gross
        values = {
            "m_payment_id": callback.payment_id,
            "merchant_id": callback.merchant_id,
            "payment_status": callback.payment_status.value,
            "amount_gross": str(amount) if amount is not None else None,
            "params": json.dumps(dict(callback.params)),
            "updated_at": now,
        }
        with self._engine.begin() as conn:
            result = conn.execute(
                update(payment_notifications)
                .where(payment_notifications.c.pf_payment_id == key)
                .values(**values)
            )
            if result.rowcount == 0:
                conn.execute(
                    insert(payment_notifications).values(
                        pf_payment_id=key, received_at=now, **values
                    )
                )

        logger.info(
            "payment_notification_recorded",
            extra={
                "payment_id": callback.payment_id,
                "payment_status": callback.payment_status.value,
            },
        )

    def get_status(self, pf_payment_id: str) -> str | None:
        """Último status gravado para o pagamento (ou None)."""
        stmt = select(payment_notifications.c.payment_status).where(
            payment_notifications.c.pf_payment_id == pf_payment_id
        )
        with self._engine.connect() as conn:
            return conn.execute(stmt).scalar_one_or_none()
