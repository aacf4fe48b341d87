"""Controlador do ciclo de vida do processo (startup e shutdown ordenados).

Ordem de startup:
config -> logging -> binding do cliente -> banco -> templates -> servidor HTTP -> catálogo ->
sessão (parear ou conectar) -> dispatcher -> aguarda o sinal de término.

Qualquer StartupError aborta o processo; recursos já abertos são liberados.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Iterator

import uvicorn
from fastapi import FastAPI
from sqlalchemy.engine import Engine

from menubot.adapters.whatsapp.client import ChatClientFactory, resolve_client_factory
from menubot.adapters.whatsapp.pairing_display import PairingDisplay, TerminalPairingDisplay
from menubot.api.app import create_app
from menubot.application.catalogue import build_checkout_info, load_pricelist
from menubot.application.dispatcher import MessageDispatcher
from menubot.application.responder import PricelistResponder
from menubot.application.session_manager import SessionManager
from menubot.config.settings import EnvironmentConfig, load_config
from menubot.domain.conversation import ConversationEngine
from menubot.domain.payments import PaymentHandler
from menubot.domain.session import SessionState
from menubot.errors import PairingCancelled
from menubot.infra.catalogue_repository import SqlCatalogueRepository
from menubot.infra.database import open_database
from menubot.infra.device_store import DeviceStore, SqlDeviceStore
from menubot.infra.payment_recorder import SqlPaymentRecorder
from menubot.infra.schema import ensure_schema
from menubot.infra.templates import load_page_templates
from menubot.observability.logging import configure_logging, get_logger

logger: logging.Logger = get_logger(__name__)

EngineFactory = Callable[[EnvironmentConfig, Engine], ConversationEngine]


def default_engine_factory(config: EnvironmentConfig, engine: Engine) -> ConversationEngine:
    return PricelistResponder()


class EmbeddedServer(uvicorn.Server):
    """Servidor uvicorn sem handlers de sinal próprios (o processo controla o término)."""

    def install_signal_handlers(self) -> None:
        return None

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield


class Application:
    """Orquestra o startup/shutdown; colaboradores podem ser trocados nos testes."""

    def __init__(
        self,
        *,
        config_loader: Callable[[], EnvironmentConfig] = load_config,
        database_opener: Callable[[str], Engine] = open_database,
        client_factory: ChatClientFactory | None = None,
        device_store_factory: Callable[[Engine], DeviceStore] = SqlDeviceStore,
        engine_factory: EngineFactory = default_engine_factory,
        payment_handler_factory: Callable[[Engine], PaymentHandler] = SqlPaymentRecorder,
        pairing_display: PairingDisplay | None = None,
        serve_http: bool = True,
    ) -> None:
        self._config_loader = config_loader
        self._database_opener = database_opener
        self._client_factory = client_factory
        self._device_store_factory = device_store_factory
        self._engine_factory = engine_factory
        self._payment_handler_factory = payment_handler_factory
        self._pairing_display = pairing_display or TerminalPairingDisplay()
        self._serve_http = serve_http

        self.config: EnvironmentConfig | None = None
        self.app: FastAPI | None = None
        self.session: SessionManager | None = None
        self.dispatcher: MessageDispatcher | None = None
        self.ready = asyncio.Event()

    async def run(self, cancel: asyncio.Event) -> None:
        """Executa até o sinal de término.

        Raises:
            StartupError: qualquer falha fatal de inicialização
        """
        config = self._config_loader()
        self.config = config
        configure_logging(config.log_level, config.service_name, config.log_format)
        logger.info(
            "startup_begin",
            extra={"version": config.version, "environment": config.environment},
        )

        db: Engine | None = None
        server: EmbeddedServer | None = None
        server_task: asyncio.Task[None] | None = None
        try:
            factory = self._client_factory or resolve_client_factory(config.chat_client_factory)
            db = self._database_opener(config.database_url)
            ensure_schema(db)
            templates = load_page_templates(config.templates_dir)

            session = SessionManager(
                factory(config), pairing_timeout_seconds=config.pairing_timeout_seconds
            )
            self.session = session

            self.app = create_app(
                config,
                templates=templates,
                payment_handler=self._payment_handler_factory(db),
                session=session,
            )
            if self._serve_http:
                server = EmbeddedServer(
                    uvicorn.Config(
                        self.app,
                        host=config.http_host,
                        port=config.http_port,
                        log_config=None,
                        access_log=False,
                    )
                )
                server_task = asyncio.create_task(server.serve())
                logger.info(
                    "http_server_starting",
                    extra={"host": config.http_host, "port": config.http_port},
                )

            pricelist = load_pricelist(SqlCatalogueRepository(db), config)
            checkout = build_checkout_info(config)

            state = session.initialize(self._device_store_factory(db))
            if state is SessionState.AWAITING_QR:
                await session.start_pairing(self._pairing_display, cancel)
            else:
                await session.connect()

            self.dispatcher = MessageDispatcher(
                config, session, self._engine_factory(config, db), pricelist, checkout
            )
            session.register_observer(self.dispatcher.handle_event)

            logger.info(
                "startup_complete",
                extra={
                    "catalogue_items": len(pricelist.catalogue),
                    "session_state": session.state.value,
                },
            )
            self.ready.set()
            await self._wait_for_shutdown(cancel, server_task)
        except PairingCancelled:
            logger.info("pairing_cancelled")
        finally:
            await self._shutdown(config, db, server, server_task)

    async def _wait_for_shutdown(
        self, cancel: asyncio.Event, server_task: asyncio.Task[None] | None
    ) -> None:
        cancel_wait = asyncio.create_task(cancel.wait())
        waiters: set[asyncio.Task[object]] = {cancel_wait}
        if server_task is not None:
            waiters.add(server_task)

        await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        if not cancel_wait.done():
            cancel_wait.cancel()
            logger.error("http_server_stopped_unexpectedly")
        else:
            logger.info("shutdown_signal_received")

    async def _shutdown(
        self,
        config: EnvironmentConfig,
        db: Engine | None,
        server: EmbeddedServer | None,
        server_task: asyncio.Task[None] | None,
    ) -> None:
        if self.session is not None:
            await self.session.disconnect()

        if server is not None:
            server.should_exit = True
        if server_task is not None:
            try:
                await asyncio.wait_for(server_task, timeout=config.shutdown_timeout_seconds)
            except TimeoutError:
                logger.warning(
                    "http_server_shutdown_timeout",
                    extra={"timeout_seconds": config.shutdown_timeout_seconds},
                )
            except Exception:  # noqa: BLE001
                logger.exception("http_server_failed")

        if db is not None:
            db.dispose()
        logger.info("shutdown_complete")
