"""Identidade do dispositivo pareado."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from menubot.domain.jid import Jid


@dataclass(frozen=True, slots=True)
class DeviceIdentity:
    """Identidade persistida de um dispositivo vinculado."""

    jid: Jid
    push_name: str | None = None
    registered_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
