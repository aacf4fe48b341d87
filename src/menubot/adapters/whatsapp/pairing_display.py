"""Exibição do código de pareamento para o operador."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import TextIO

import qrcode


class PairingDisplay(ABC):
    """Colaborador que mostra cada código de pareamento recebido."""

    @abstractmethod
    def show_code(self, code: str) -> None: ...


class TerminalPairingDisplay(PairingDisplay):
    """Desenha o código como QR no terminal (meio-bloco), pronto para o app escanear."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdout

    def show_code(self, code: str) -> None:
        qr = qrcode.QRCode(border=1, error_correction=qrcode.constants.ERROR_CORRECT_L)
        qr.add_data(code)
        qr.make(fit=True)

        self._stream.write("Scan this QR code with the phone app (Linked devices):\n")
        qr.print_ascii(out=self._stream, invert=True)
        self._stream.flush()
