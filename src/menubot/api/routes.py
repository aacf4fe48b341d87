"""Rotas HTTP dos webhooks do gateway de pagamento."""

from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse

from menubot.adapters.payfast.signature import verify_itn_signature
from menubot.api.dependencies import get_config, get_payment_handler, get_session, get_templates
from menubot.application.session_manager import SessionManager
from menubot.config.settings import (
    PAYMENT_CANCEL_PATH,
    PAYMENT_NOTIFY_PATH,
    PAYMENT_RETURN_PATH,
    EnvironmentConfig,
)
from menubot.domain.payments import PaymentCallback, PaymentHandler
from menubot.infra.templates import PageTemplates
from menubot.observability.logging import get_logger
from menubot.observability.timing import timed

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health")
def health(
    config: EnvironmentConfig = Depends(get_config),
    session: SessionManager | None = Depends(get_session),
) -> dict[str, Any]:
    """Healthcheck com snapshot da sessão de mensagens."""
    return {
        "status": "ok",
        "service": config.service_name,
        "version": config.version,
        "session": session.status().to_dict() if session is not None else None,
    }


@router.get(PAYMENT_RETURN_PATH, response_class=HTMLResponse)
def payment_return(
    request: Request,
    templates: PageTemplates = Depends(get_templates),
) -> HTMLResponse:
    """Página exibida ao comprador após pagar."""
    html = templates.return_page.render(params=dict(request.query_params))
    return HTMLResponse(content=html)


@router.get(PAYMENT_CANCEL_PATH, response_class=HTMLResponse)
def payment_canceled(
    request: Request,
    templates: PageTemplates = Depends(get_templates),
) -> HTMLResponse:
    """Página exibida quando o comprador cancela o pagamento."""
    html = templates.cancel_page.render(params=dict(request.query_params))
    return HTMLResponse(content=html)


@router.get(PAYMENT_NOTIFY_PATH)
async def payment_notify(
    request: Request,
    config: EnvironmentConfig = Depends(get_config),
    handler: PaymentHandler = Depends(get_payment_handler),
) -> PlainTextResponse:
    """Notificação do gateway (ITN): valida assinatura e comerciante, depois delega."""
    items = list(request.query_params.multi_items())
    signature_result = verify_itn_signature(items, config.passphrase)
    callback = PaymentCallback.from_items(items, signature_result)

    if not signature_result.valid:
        logger.warning(
            "payment_notify_rejected",
            extra={"reason": signature_result.error, "payment_id": callback.payment_id},
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid_signature")

    if callback.merchant_id != config.merchant_id:
        logger.warning(
            "payment_notify_rejected",
            extra={"reason": "merchant_mismatch", "payment_id": callback.payment_id},
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="merchant_mismatch")

    try:
        with timed("payment_handler"):
            async with asyncio.timeout(config.webhook_timeout_seconds):
                await asyncio.to_thread(handler.handle_notification, callback)
    except TimeoutError as exc:
        logger.error(
            "payment_handler_timeout",
            extra={
                "payment_id": callback.payment_id,
                "timeout_seconds": config.webhook_timeout_seconds,
            },
        )
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail="payment_handler_timeout"
        ) from exc
    except Exception as exc:  # noqa: BLE001
        logger.error(
            "payment_handler_failed",
            extra={
                "payment_id": callback.payment_id,
                "error_type": type(exc).__name__,
                "error": str(exc),
            },
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="payment_handler_failed"
        ) from exc

    logger.info(
        "payment_notify_accepted",
        extra={
            "payment_id": callback.payment_id,
            "payment_status": callback.payment_status.value,
        },
    )
    return PlainTextResponse("OK")
