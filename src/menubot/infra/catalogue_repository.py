"""Leitura do catálogo de itens (pricelist) no banco."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from sqlalchemy import insert, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from menubot.domain.catalogue import CatalogueItem
from menubot.errors import CatalogueLoadError
from menubot.infra.schema import catalogue_items
from menubot.observability.logging import get_logger

logger = get_logger(__name__)


class SqlCatalogueRepository:
    """Repositório somente leitura do catálogo (mais ``add_item`` para seed)."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def load_items(self, catalogue_id: str) -> tuple[CatalogueItem, ...]:
        """Itens do catálogo ordenados por posição e id.

        Raises:
            CatalogueLoadError: falha de banco ou preço inválido
        """
        stmt = (
            select(catalogue_items)
            .where(catalogue_items.c.catalogue_id == catalogue_id)
            .order_by(catalogue_items.c.position, catalogue_items.c.id)
        )
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(stmt).mappings().all()
        except SQLAlchemyError as exc:
            raise CatalogueLoadError(f"Failed to load catalogue {catalogue_id!r}: {exc}") from exc

        items: list[CatalogueItem] = []
        for row in rows:
            try:
                price = Decimal(row["unit_price"])
            except InvalidOperation as exc:
                raise CatalogueLoadError(
                    f"Invalid unit_price for item {row['item_id']!r}: {row['unit_price']!r}"
                ) from exc
            items.append(
                CatalogueItem(
                    item_id=row["item_id"],
                    name=row["name"],
                    unit_price=price,
                    unit=row["unit"],
                    description=row["description"],
                )
            )

        logger.info(
            "catalogue_loaded",
            extra={"catalogue_id": catalogue_id, "item_count": len(items)},
        )
        return tuple(items)

    def add_item(self, catalogue_id: str, item: CatalogueItem, position: int = 0) -> None:
        """Insere um item (uso em seed e testes)."""
        with self._engine.begin() as conn:
            conn.execute(
                insert(catalogue_items).values(
                    catalogue_id=catalogue_id,
                    item_id=item.item_id,
                    name=item.name,
                    unit_price=str(item.unit_price),
                    unit=item.unit,
                    description=item.description,
                    position=position,
                )
            )
