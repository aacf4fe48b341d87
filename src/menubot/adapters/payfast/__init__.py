"""Adapter do gateway de pagamento PayFast."""

from menubot.adapters.payfast.signature import (
    build_signature_base,
    generate_signature,
    verify_itn_signature,
)

__all__ = ["build_signature_base", "generate_signature", "verify_itn_signature"]
