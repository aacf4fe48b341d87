"""Abertura do engine SQLAlchemy (pool compartilhado pelo processo)."""

from __future__ import annotations

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from menubot.errors import DatabaseOpenError
from menubot.observability.logging import get_logger

logger = get_logger(__name__)


def _redact_url(url: str) -> str:
    """Remove credenciais da URL para logs."""
    if "@" not in url:
        return url
    scheme, _, rest = url.partition("://")
    return f"{scheme}://***@{rest.rsplit('@', 1)[1]}"


def open_database(url: str) -> Engine:
    """Cria o engine e valida a conectividade com ``SELECT 1``.

    Raises:
        DatabaseOpenError: URL inválida, driver ausente ou banco inacessível
    """
    try:
        engine = create_engine(url, pool_pre_ping=True)
    except (ArgumentError, ImportError) as exc:
        raise DatabaseOpenError(f"Invalid database URL or driver: {exc}") from exc

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        engine.dispose()
        raise DatabaseOpenError(f"Database connectivity check failed: {exc}") from exc

    logger.info(
        "database_opened",
        extra={"url": _redact_url(url), "dialect": engine.dialect.name},
    )
    return engine
