"""Eventos que disparam transições no FSM da sessão."""

from __future__ import annotations

from enum import StrEnum


class SessionEvent(StrEnum):
    """Eventos canônicos do ciclo de vida da sessão."""

    DEVICE_LOADED = "DEVICE_LOADED"
    """Identidade persistida encontrada no device store."""

    DEVICE_MISSING = "DEVICE_MISSING"
    """Nenhuma identidade persistida; pareamento necessário."""

    PAIR_SUCCESS = "PAIR_SUCCESS"
    """Código lido e dispositivo vinculado."""

    PAIR_FAILED = "PAIR_FAILED"
    """Canal de pareamento terminou em timeout/erro ou foi interrompido."""

    CONNECT_SUCCESS = "CONNECT_SUCCESS"
    """Cliente conectado ao servidor."""

    CONNECT_FAILED = "CONNECT_FAILED"
    """Falha de conexão (fatal, sem retry)."""

    CONNECTION_LOST = "CONNECTION_LOST"
    """Servidor/rede encerrou a conexão ou revogou a credencial."""

    SHUTDOWN = "SHUTDOWN"
    """Encerramento solicitado pelo processo."""
