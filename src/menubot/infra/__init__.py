"""Camada de infraestrutura: banco (SQLAlchemy Core) e templates (Jinja2).

- Infraestrutura não decide regra de negócio
- Domínio não conhece infraestrutura
"""

from menubot.infra.catalogue_repository import SqlCatalogueRepository
from menubot.infra.database import open_database
from menubot.infra.device_store import DeviceStore, InMemoryDeviceStore, SqlDeviceStore
from menubot.infra.payment_recorder import SqlPaymentRecorder
from menubot.infra.schema import ensure_schema, metadata
from menubot.infra.templates import PageTemplates, load_page_templates

__all__ = [
    "open_database",
    "ensure_schema",
    "metadata",
    "SqlCatalogueRepository",
    "DeviceStore",
    "InMemoryDeviceStore",
    "SqlDeviceStore",
    "SqlPaymentRecorder",
    "PageTemplates",
    "load_page_templates",
]
