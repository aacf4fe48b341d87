"""Identificadores de endereço do protocolo WhatsApp (JID).

Formato: ``usuario[.agente][:dispositivo]@servidor``. O número do remetente é
a parte de usuário do JID "non-AD" (sem agente e sem dispositivo).
"""

from __future__ import annotations

from dataclasses import dataclass

# Servidor de usuários comuns
WHATSAPP_USER_SERVER: str = "s.whatsapp.net"


@dataclass(frozen=True, slots=True)
class Jid:
    """Endereço de protocolo (usuário, servidor e sufixos de roteamento)."""

    user: str
    server: str
    agent: int = 0
    device: int = 0

    @classmethod
    def parse(cls, raw: str) -> Jid:
        """Converte texto em Jid; aceita também apenas o servidor."""
        raw = raw.strip()
        if "@" not in raw:
            return cls(user="", server=raw)

        user_part, server = raw.split("@", 1)
        agent = 0
        device = 0
        if ":" in user_part:
            user_part, device_text = user_part.split(":", 1)
            device = int(device_text) if device_text.isdigit() else 0
        if "." in user_part:
            user_part, agent_text = user_part.split(".", 1)
            agent = int(agent_text) if agent_text.isdigit() else 0
        return cls(user=user_part, server=server, agent=agent, device=device)

    def to_non_ad(self) -> Jid:
        """Remove agente e dispositivo, mantendo usuário e servidor."""
        return Jid(user=self.user, server=self.server)

    @property
    def number(self) -> str:
        """Parte de usuário do JID non-AD (número do remetente)."""
        return self.to_non_ad().user.split("@", 1)[0]

    def __str__(self) -> str:
        if not self.user:
            return self.server
        user = self.user
        if self.agent:
            user = f"{user}.{self.agent}"
        if self.device:
            user = f"{user}:{self.device}"
        return f"{user}@{self.server}"


def user_jid(number: str) -> Jid:
    """JID de usuário comum para um número (``<numero>@s.whatsapp.net``)."""
    return Jid(user=number, server=WHATSAPP_USER_SERVER)
