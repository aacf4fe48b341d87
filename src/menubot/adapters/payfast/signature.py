"""Validação de assinatura do ITN PayFast (MD5 dos parâmetros url-encoded)."""

from __future__ import annotations

import hashlib
import hmac
from collections.abc import Iterable
from urllib.parse import quote_plus

from menubot.domain.payments import SignatureResult

SIGNATURE_FIELD = "signature"


def build_signature_base(params: Iterable[tuple[str, str]], passphrase: str | None) -> str:
    """Monta a string assinada: pares na ordem recebida, sem ``signature``.

    A passphrase entra por último quando presente.
    """
    parts = [
        f"{key}={quote_plus(value.strip())}"
        for key, value in params
        if key != SIGNATURE_FIELD
    ]
    if passphrase:
        parts.append(f"passphrase={quote_plus(passphrase.strip())}")
    return "&".join(parts)


def generate_signature(params: Iterable[tuple[str, str]], passphrase: str | None) -> str:
    """Assinatura MD5 (hex minúsculo) dos parâmetros."""
    base = build_signature_base(params, passphrase)
    return hashlib.md5(base.encode("utf-8")).hexdigest()  # noqa: S324 - exigido pelo gateway


def verify_itn_signature(
    params: Iterable[tuple[str, str]], passphrase: str | None
) -> SignatureResult:
    """Valida a assinatura enviada no campo ``signature`` do ITN."""
    items = list(params)
    received = next((value for key, value in items if key == SIGNATURE_FIELD), None)
    if not received:
        return SignatureResult(valid=False, error="missing_signature")

    expected = generate_signature(items, passphrase)
    if not hmac.compare_digest(expected, received.strip().lower()):
        return SignatureResult(valid=False, error="signature_mismatch")

    return SignatureResult(valid=True)
