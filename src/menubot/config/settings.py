"""Configuração do processo via variáveis de ambiente.

Um único EnvironmentConfig imutável é construído no startup e passado
explicitamente a cada componente. Nenhum módulo faz lookup ambiente por conta
própria.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from menubot.errors import ConfigurationError, MissingEnvironmentError

# Caminhos fixos dos webhooks PayFast (relativos ao HOMEBASEURL)
PAYMENT_RETURN_PATH: str = "/payment_return"
PAYMENT_CANCEL_PATH: str = "/payment_canceled"
PAYMENT_NOTIFY_PATH: str = "/payment_notify"


# Ordem de declaração = ordem do diagnóstico
REQUIRED_VARIABLES: dict[str, str] = {
    "DATABASE_URL": "database_url",
    "HOST_NUMBER": "host_number",
    "HOMEBASEURL": "home_base_url",
    "MERCHANTID": "merchant_id",
    "MERCHANTKEY": "merchant_key",
    "PASSPHRASE": "passphrase",
    "PFHOST": "pf_host",
    "CHAT_CLIENT_FACTORY": "chat_client_factory",
}


class EnvironmentConfig(BaseSettings):
    """Configurações lidas do ambiente (e do arquivo app.env, se existir)."""

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file="app.env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Obrigatórias (vazias = processo não sobe)
    database_url: str = ""
    host_number: str = ""
    home_base_url: str = Field("", validation_alias=AliasChoices("HOMEBASEURL", "home_base_url"))
    merchant_id: str = Field("", validation_alias=AliasChoices("MERCHANTID", "merchant_id"))
    merchant_key: str = Field("", validation_alias=AliasChoices("MERCHANTKEY", "merchant_key"))
    passphrase: str = ""
    pf_host: str = Field("", validation_alias=AliasChoices("PFHOST", "pf_host"))
    # Binding do protocolo: "modulo:callable" que recebe o config e devolve um ChatClient
    chat_client_factory: str = ""
    working_dir: Path = Field(default_factory=Path.cwd)

    # Aplicação
    service_name: str = "menubot"
    version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"
    log_format: str = "json"  # json | text

    # Servidor HTTP dos webhooks
    http_host: str = "0.0.0.0"
    http_port: int = 8080

    # Conversa / catálogo
    test_mode: bool = False  # Nunca encaminha mensagens ao motor de conversa
    auto_increment: bool = False
    catalogue_id: str = "Pig"
    pricelist_preamble: str = "All fertilizer quoted per gram."
    item_name_prefix: str = "Order"

    # Limites de tempo (segundos)
    stale_message_seconds: int = 10
    send_timeout_seconds: float = 15.0
    engine_timeout_seconds: float = 20.0
    webhook_timeout_seconds: float = 10.0
    pairing_timeout_seconds: float = 180.0
    shutdown_timeout_seconds: float = 5.0

    def missing_required(self) -> list[str]:
        """Retorna os nomes das variáveis obrigatórias vazias, na ordem declarada."""
        return [name for name, attr in REQUIRED_VARIABLES.items() if not getattr(self, attr)]

    def validate_tunables(self) -> list[str]:
        """Valida parâmetros opcionais. Retorna lista de erros (vazia = OK)."""
        errors: list[str] = []
        if self.log_format not in {"json", "text"}:
            errors.append("LOG_FORMAT inválido: use json | text")
        if not 0 < self.http_port < 65536:
            errors.append("HTTP_PORT deve estar entre 1 e 65535")
        if not self.home_base_url.startswith(("http://", "https://")):
            errors.append("HOMEBASEURL deve começar com http:// ou https://")
        if ":" not in self.chat_client_factory:
            errors.append("CHAT_CLIENT_FACTORY deve ter o formato 'modulo:callable'")
        for name in (
            "send_timeout_seconds",
            "engine_timeout_seconds",
            "webhook_timeout_seconds",
            "pairing_timeout_seconds",
            "shutdown_timeout_seconds",
        ):
            if getattr(self, name) <= 0:
                errors.append(f"{name.upper()} deve ser maior que zero")
        if self.stale_message_seconds < 0:
            errors.append("STALE_MESSAGE_SECONDS não pode ser negativo")
        return errors

    @property
    def templates_dir(self) -> Path:
        """Diretório dos templates HTML das páginas de retorno/cancelamento."""
        return self.working_dir / "templates"

    def public_url(self, path: str) -> str:
        """Monta URL pública a partir do HOMEBASEURL (sem barra dupla)."""
        return f"{self.home_base_url.rstrip('/')}{path}"

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment.lower() in ("production", "prod")


def load_config(**overrides) -> EnvironmentConfig:
    """Carrega e valida o EnvironmentConfig.

    Raises:
        MissingEnvironmentError: alguma variável obrigatória ausente/vazia
            (a mensagem nomeia cada uma delas)
        ConfigurationError: valor presente mas inválido (tipo ou faixa)
    """
    try:
        config = EnvironmentConfig(**overrides)
    except ValidationError as exc:
        fields = ", ".join(str(err["loc"][0]).upper() for err in exc.errors() if err["loc"])
        raise ConfigurationError(f"Configuração inválida: {fields}") from exc

    missing = config.missing_required()
    if missing:
        raise MissingEnvironmentError(missing)

    errors = config.validate_tunables()
    if errors:
        raise ConfigurationError(f"Configuração inválida: {'; '.join(errors)}")

    return config
