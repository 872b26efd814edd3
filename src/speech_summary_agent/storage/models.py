"""
ORM-модели базы данных.

Назначение:
- хранение сессий записи (транскрипт, счётчики, последние summary/перевод)
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from speech_summary_agent.common.time import utc_now


# =============================================================================
# BASE
# =============================================================================
class Base(DeclarativeBase):
    pass


# =============================================================================
# AUDIO SESSION
# =============================================================================
class AudioSession(Base):
    """
    Сессия записи: один цикл запись -> транскрипт -> summary/перевод.
    """

    __tablename__ = "audio_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    user_id: Mapped[str | None] = mapped_column(String(128), index=True, nullable=True)

    transcript: Mapped[str] = mapped_column(Text, default="", nullable=False)
    deepgram_calls: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    accumulated_size: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    summary_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    summary_language: Mapped[str | None] = mapped_column(String(16), nullable=True)

    translation: Mapped[str | None] = mapped_column(Text, nullable=True)
    translation_language: Mapped[str | None] = mapped_column(String(16), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )
