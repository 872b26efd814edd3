from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from speech_summary_agent.stt.base import STTResult


class MockSTTProvider:
    """Заглушка STT: отдаёт заранее заданные фрагменты по очереди (None = тишина).

    Без сценария возвращает предсказуемый текст, чтобы гонять end-to-end в dev.
    """

    name = "mock"

    def __init__(self, script: Iterable[str | None] | None = None) -> None:
        self._script: deque[str | None] | None = deque(script) if script is not None else None
        self.calls: list[int] = []

    def transcribe_chunk(self, *, audio: bytes) -> STTResult | None:
        self.calls.append(len(audio))
        if self._script is None:
            return STTResult(text=f"mock transcript {len(audio)} bytes")
        if not self._script:
            return None
        text = self._script.popleft()
        if not text or not text.strip():
            return None
        return STTResult(text=text.strip())
