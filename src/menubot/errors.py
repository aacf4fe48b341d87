"""Hierarquia de erros do menubot.

Duas famílias:
- StartupError: falhas fatais no boot (processo encerra com status 1)
- Erros recuperáveis (SendError, SessionError): contidos na mensagem/requisição
"""

from __future__ import annotations


class MenubotError(Exception):
    """Erro base do serviço."""


# -----------------------------------------------------------------------------
# Fatais no startup
# -----------------------------------------------------------------------------


class StartupError(MenubotError):
    """Falha fatal durante a inicialização; nenhum modo parcial é suportado."""

    stage: str = "startup"


class ConfigurationError(StartupError):
    """Configuração inválida (valores presentes mas incoerentes)."""

    stage = "config"


class MissingEnvironmentError(ConfigurationError):
    """Uma ou mais variáveis de ambiente obrigatórias ausentes ou vazias."""

    def __init__(self, names: list[str] | tuple[str, ...]) -> None:
        self.names = tuple(names)
        if len(self.names) == 1:
            message = f"{self.names[0]} environment variable does not exist"
        else:
            message = f"Missing required environment variables: {', '.join(self.names)}"
        super().__init__(message)


class DatabaseOpenError(StartupError):
    """Não foi possível abrir/validar a conexão com o banco."""

    stage = "database"


class TemplateLoadError(StartupError):
    """Template HTML ausente ou com erro de sintaxe."""

    stage = "templates"


class CatalogueLoadError(StartupError):
    """Falha ao ler o catálogo/pricelist do banco."""

    stage = "catalogue"


class DeviceStoreError(StartupError):
    """Falha ao ler ou gravar a identidade do dispositivo pareado."""

    stage = "device_store"


class PairingFailed(StartupError):
    """Pareamento terminou sem sucesso (timeout, erro ou canal encerrado)."""

    stage = "pairing"

    def __init__(self, reason: str) -> None:
        super().__init__(f"Pairing failed: {reason}")
        self.reason = reason


class SessionConnectError(StartupError):
    """Falha ao conectar o cliente de mensagens (sem retry)."""

    stage = "connect"


# -----------------------------------------------------------------------------
# Sessão / envio (recuperáveis)
# -----------------------------------------------------------------------------


class SessionError(MenubotError):
    """Erro de uso do Session Manager."""


class InvalidSessionTransition(SessionError):
    """Transição de estado não permitida pela tabela do FSM."""


class ObserverAlreadyRegistered(SessionError):
    """Apenas um observer de eventos é aceito por sessão."""


class SessionNotConnected(SessionError):
    """Operação exige sessão no estado CONNECTED."""


class PairingCancelled(SessionError):
    """Pareamento interrompido pelo sinal de término."""


class SendError(MenubotError):
    """Falha ao enviar mensagem outbound pelo cliente de mensagens."""
