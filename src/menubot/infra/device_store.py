"""Persistência da identidade do dispositivo pareado.

Um processo mantém no máximo uma identidade. ``delete`` é usado quando o
servidor revoga a credencial (LoggedOut), forçando novo pareamento.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from menubot.domain.identity import DeviceIdentity
from menubot.domain.jid import Jid
from menubot.errors import DeviceStoreError
from menubot.infra.schema import device_identities
from menubot.observability.logging import get_logger, mask_number

logger = get_logger(__name__)

DEFAULT_SLOT = "primary"


class DeviceStore(ABC):
    """Contrato de armazenamento da identidade do dispositivo.

    Todas as operações lançam DeviceStoreError em falha de backend.
    """

    @abstractmethod
    def load(self) -> DeviceIdentity | None:
        """Identidade persistida ou None se o dispositivo nunca pareou."""

    @abstractmethod
    def save(self, identity: DeviceIdentity) -> None:
        """Persiste (ou substitui) a identidade."""

    @abstractmethod
    def delete(self) -> bool:
        """Remove a identidade. Retorna True se havia uma."""


class InMemoryDeviceStore(DeviceStore):
    """Armazenamento em memória (apenas dev/testes)."""

    def __init__(self, identity: DeviceIdentity | None = None) -> None:
        self._identity = identity

    def load(self) -> DeviceIdentity | None:
        return self._identity

    def save(self, identity: DeviceIdentity) -> None:
        self._identity = identity

    def delete(self) -> bool:
        existed = self._identity is not None
        self._identity = None
        return existed


class SqlDeviceStore(DeviceStore):
    """Identidade persistida na tabela ``device_identities``."""

    def __init__(self, engine: Engine, slot: str = DEFAULT_SLOT) -> None:
        self._engine = engine
        self._slot = slot

    def load(self) -> DeviceIdentity | None:
        stmt = select(device_identities).where(device_identities.c.slot == self._slot)
        try:
            with self._engine.connect() as conn:
                row = conn.execute(stmt).mappings().first()
        except SQLAlchemyError as exc:
            raise DeviceStoreError(f"Failed to load device identity: {exc}") from exc

        if row is None:
            return None
        return DeviceIdentity(
            jid=Jid.parse(row["jid"]),
            push_name=row["push_name"],
            registered_at=datetime.fromisoformat(row["registered_at"]),
        )

    def save(self, identity: DeviceIdentity) -> None:
        values = {
            "jid": str(identity.jid),
            "push_name": identity.push_name,
            "registered_at": identity.registered_at.isoformat(),
        }
        try:
            with self._engine.begin() as conn:
                result = conn.execute(
                    update(device_identities)
                    .where(device_identities.c.slot == self._slot)
                    .values(**values)
                )
                if result.rowcount == 0:
                    conn.execute(insert(device_identities).values(slot=self._slot, **values))
        except SQLAlchemyError as exc:
            raise DeviceStoreError(f"Failed to save device identity: {exc}") from exc

        logger.info("device_identity_saved", extra={"number": mask_number(identity.jid.number)})

    def delete(self) -> bool:
        try:
            with self._engine.begin() as conn:
                result = conn.execute(
                    delete(device_identities).where(device_identities.c.slot == self._slot)
                )
        except SQLAlchemyError as exc:
            raise DeviceStoreError(f"Failed to delete device identity: {exc}") from exc

        deleted = result.rowcount > 0
        logger.info("device_identity_deleted", extra={"deleted": deleted})
        return deleted
