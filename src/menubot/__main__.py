"""Entry point: ``python -m menubot`` ou o script ``menubot``."""

from __future__ import annotations

import asyncio
import signal
import sys

from menubot.application.lifecycle import Application
from menubot.errors import StartupError
from menubot.observability.logging import configure_logging, get_logger

logger = get_logger(__name__)


async def _run() -> None:
    cancel = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, cancel.set)

    await Application().run(cancel)


def main() -> None:
    # Logging mínimo até o config ser carregado
    configure_logging("INFO", "menubot")
    try:
        asyncio.run(_run())
    except StartupError as exc:
        logger.critical("startup_failed", extra={"stage": exc.stage, "error": str(exc)})
        sys.exit(1)


if __name__ == "__main__":
    main()
