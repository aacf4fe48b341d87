"""Configuração centralizada do menubot.

Este módulo exporta:
- EnvironmentConfig: configuração imutável via variáveis de ambiente
- load_config: carrega e valida (fail-fast em variável obrigatória ausente)
- Caminhos fixos dos webhooks PayFast

Uso típico:
    from menubot.config import load_config

    config = load_config()
"""

from menubot.config.settings import (
    PAYMENT_CANCEL_PATH,
    PAYMENT_NOTIFY_PATH,
    PAYMENT_RETURN_PATH,
    REQUIRED_VARIABLES,
    EnvironmentConfig,
    load_config,
)

__all__ = [
    "EnvironmentConfig",
    "load_config",
    "REQUIRED_VARIABLES",
    "PAYMENT_RETURN_PATH",
    "PAYMENT_CANCEL_PATH",
    "PAYMENT_NOTIFY_PATH",
]
