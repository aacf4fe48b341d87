"""Fábrica da aplicação FastAPI (webhooks do gateway + health)."""

from __future__ import annotations

from fastapi import FastAPI

from menubot.api.routes import router
from menubot.application.session_manager import SessionManager
from menubot.config.settings import EnvironmentConfig
from menubot.domain.payments import PaymentHandler
from menubot.infra.templates import PageTemplates
from menubot.observability.middleware import CorrelationIdMiddleware


def create_app(
    config: EnvironmentConfig,
    *,
    templates: PageTemplates,
    payment_handler: PaymentHandler,
    session: SessionManager | None = None,
) -> FastAPI:
    """Cria a aplicação FastAPI com dependências explícitas em ``app.state``."""
    app = FastAPI(title=config.service_name, version=config.version)
    app.add_middleware(CorrelationIdMiddleware)
    app.include_router(router)

    app.state.config = config
    app.state.templates = templates
    app.state.payment_handler = payment_handler
    app.state.session = session

    return app
