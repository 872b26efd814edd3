"""
Базовый интерфейс STT (Speech-to-Text).

Контракт: байты чанка на вход, текст или None на выход.
None не ошибка: чанк мог быть тишиной, провайдер мог не ответить.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass
class STTResult:
    text: str
    confidence: float | None = None


class STTProvider(Protocol):
    name: str

    def transcribe_chunk(self, *, audio: bytes) -> STTResult | None: ...
