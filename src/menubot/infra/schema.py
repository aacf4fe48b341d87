"""Tabelas SQLAlchemy Core do menubot.

Preços e datas são gravados como texto (Decimal e ISO-8601) para que o
mesmo schema funcione em SQLite e PostgreSQL sem perda de precisão.
"""

from __future__ import annotations

from sqlalchemy import Column, Integer, MetaData, Table, Text, UniqueConstraint
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from menubot.errors import DatabaseOpenError

metadata = MetaData()

catalogue_items = Table(
    "catalogue_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("catalogue_id", Text, nullable=False, index=True),
    Column("item_id", Text, nullable=False),
    Column("name", Text, nullable=False),
    Column("unit_price", Text, nullable=False),  # Decimal como texto
    Column("unit", Text, nullable=False, default="g", server_default="g"),
    Column("description", Text),
    Column("position", Integer, nullable=False, default=0, server_default="0"),
    UniqueConstraint("catalogue_id", "item_id"),
)

# Um único dispositivo pareado por processo (slot fixo)
device_identities = Table(
    "device_identities",
    metadata,
    Column("slot", Text, primary_key=True),
    Column("jid", Text, nullable=False),
    Column("push_name", Text),
    Column("registered_at", Text, nullable=False),
)

payment_notifications = Table(
    "payment_notifications",
    metadata,
    Column("pf_payment_id", Text, primary_key=True),
    Column("m_payment_id", Text),
    Column("merchant_id", Text),
    Column("payment_status", Text, nullable=False),
    Column("amount_gross", Text),
    Column("params", Text, nullable=False),  # JSON dos parâmetros recebidos
    Column("received_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
)


def ensure_schema(engine: Engine) -> None:
    """Cria as tabelas ausentes (idempotente)."""
    try:
        metadata.create_all(engine)
    except SQLAlchemyError as exc:
        raise DatabaseOpenError(f"Failed to create schema: {exc}") from exc
