"""Sanitização do texto inbound (somente ASCII) antes de chegar ao motor."""

from __future__ import annotations

ASCII_MAX = 127


def sanitize(text: str) -> str:
    """Remove todo code point acima de 127, preservando a ordem do restante."""
    return "".join(char for char in text if ord(char) <= ASCII_MAX)
