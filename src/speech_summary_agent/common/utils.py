"""
Общие утилиты проекта.

Правила:
- сюда кладём только реально общие функции
- без бизнес-логики
"""

from __future__ import annotations

import base64
import binascii


def b64_decode(data_b64: str) -> bytes:
    """
    base64(str) -> bytes. Строгая проверка алфавита.
    """
    try:
        return base64.b64decode(data_b64.encode("utf-8"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError("invalid base64 payload") from e


def text_head(text: str | None, limit: int = 50) -> str:
    """
    Начало строки для логов (чтобы не тащить весь транскрипт).
    """
    value = text or ""
    if len(value) <= limit:
        return value
    return value[:limit] + "..."

