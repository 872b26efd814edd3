"""
Доменная модель сессии записи.

Сессия живёт, пока запись есть в хранилище: отдельного статуса нет.
Транскрипт только дописывается, счётчик вызовов STT только растёт.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from typing import Any

from speech_summary_agent.common.time import utc_now


def append_fragment(transcript: str, fragment: str) -> str:
    """Дописывает фрагмент через один пробел (первый фрагмент: без пробела)."""
    if not fragment:
        return transcript
    if not transcript:
        return fragment
    return f"{transcript} {fragment}"


@dataclass
class SessionRecord:
    session_id: str
    user_id: str | None = None
    transcript: str = ""
    transcription_call_count: int = 0
    accumulated_byte_size: int = 0

    summary: str | None = None
    summary_type: str | None = None
    summary_language: str | None = None

    translation: str | None = None
    translation_language: str | None = None

    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def with_chunk(self, *, fragment: str | None, size_bytes: int) -> SessionRecord:
        """
        Новое состояние после приёма чанка.
        Байты учитываются всегда, текст и счётчик: только при непустом фрагменте.
        """
        out = replace(
            self,
            accumulated_byte_size=self.accumulated_byte_size + max(0, size_bytes),
            updated_at=utc_now(),
        )
        if fragment:
            out.transcript = append_fragment(self.transcript, fragment)
            out.transcription_call_count = self.transcription_call_count + 1
        return out

    def with_summary(self, *, summary: str, summary_type: str, language: str) -> SessionRecord:
        return replace(
            self,
            summary=summary,
            summary_type=summary_type,
            summary_language=language,
            updated_at=utc_now(),
        )

    def with_translation(self, *, translation: str, language: str) -> SessionRecord:
        return replace(
            self,
            translation=translation,
            translation_language=language,
            updated_at=utc_now(),
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat()
        data["updated_at"] = self.updated_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionRecord:
        payload = dict(data)
        for key in ("created_at", "updated_at"):
            value = payload.get(key)
            if isinstance(value, str):
                payload[key] = datetime.fromisoformat(value)
        known = {f for f in cls.__dataclass_fields__}
        return cls(**{k: v for k, v in payload.items() if k in known})
