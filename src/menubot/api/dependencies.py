"""Dependências injetadas nas rotas."""

from __future__ import annotations

from fastapi import Request

from menubot.application.session_manager import SessionManager
from menubot.config.settings import EnvironmentConfig
from menubot.domain.payments import PaymentHandler
from menubot.infra.templates import PageTemplates


def get_config(request: Request) -> EnvironmentConfig:
    """Retorna a configuração imutável do processo."""

    return request.app.state.config


def get_templates(request: Request) -> PageTemplates:
    """Retorna os templates compilados no startup."""

    return request.app.state.templates


def get_payment_handler(request: Request) -> PaymentHandler:
    """Retorna o colaborador que aplica notificações de pagamento."""

    return request.app.state.payment_handler


def get_session(request: Request) -> SessionManager | None:
    """Session Manager ativo (None antes do cliente ser criado)."""
    return request.app.state.session
