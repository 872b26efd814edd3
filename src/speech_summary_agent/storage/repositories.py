"""
Репозитории (DAO слой) и SQL-реализация SessionStore.

Правила:
- Никакой бизнес-логики
- Только CRUD и запросы
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from speech_summary_agent.common.errors import AppError, ErrCode
from speech_summary_agent.domain.session import SessionRecord

from .db import db_session
from .models import AudioSession


def _aware(value: datetime) -> datetime:
    # sqlite отдаёт naive datetime даже для DateTime(timezone=True)
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def to_record(row: AudioSession) -> SessionRecord:
    return SessionRecord(
        session_id=row.session_id,
        user_id=row.user_id,
        transcript=row.transcript or "",
        transcription_call_count=row.deepgram_calls or 0,
        accumulated_byte_size=row.accumulated_size or 0,
        summary=row.summary,
        summary_type=row.summary_type,
        summary_language=row.summary_language,
        translation=row.translation,
        translation_language=row.translation_language,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def apply_record(row: AudioSession, record: SessionRecord) -> AudioSession:
    row.user_id = record.user_id
    row.transcript = record.transcript
    row.deepgram_calls = record.transcription_call_count
    row.accumulated_size = record.accumulated_byte_size
    row.summary = record.summary
    row.summary_type = record.summary_type
    row.summary_language = record.summary_language
    row.translation = record.translation
    row.translation_language = record.translation_language
    row.updated_at = record.updated_at
    return row


# =============================================================================
# AUDIO SESSION REPOSITORY
# =============================================================================
class AudioSessionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, session_id: str) -> AudioSession | None:
        return self.session.execute(
            select(AudioSession).where(AudioSession.session_id == session_id)
        ).scalar_one_or_none()

    def add(self, row: AudioSession) -> None:
        self.session.add(row)

    def list_by_user(self, user_id: str, *, limit: int = 50) -> list[AudioSession]:
        return list(
            self.session.execute(
                select(AudioSession)
                .where(AudioSession.user_id == user_id)
                .order_by(desc(AudioSession.created_at), desc(AudioSession.id))
                .limit(max(1, min(limit, 500)))
            ).scalars()
        )


# =============================================================================
# SESSION STORE (SQL)
# =============================================================================
class SqlSessionStore:
    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self._factory = session_factory

    def get(self, session_id: str) -> SessionRecord | None:
        with db_session(self._factory) as s:
            row = AudioSessionRepository(s).get(session_id)
            return to_record(row) if row else None

    def create(self, record: SessionRecord) -> SessionRecord:
        try:
            with db_session(self._factory) as s:
                row = AudioSession(session_id=record.session_id, created_at=record.created_at)
                AudioSessionRepository(s).add(apply_record(row, record))
        except IntegrityError as e:
            raise AppError(ErrCode.STORAGE_ERROR, "Session already exists") from e
        return record

    def update(self, record: SessionRecord) -> SessionRecord:
        with db_session(self._factory) as s:
            row = AudioSessionRepository(s).get(record.session_id)
            if row is None:
                raise AppError(ErrCode.STORAGE_ERROR, "Session does not exist")
            apply_record(row, record)
        return record

    def list_by_user(self, user_id: str, *, limit: int = 50) -> list[SessionRecord]:
        with db_session(self._factory) as s:
            return [to_record(r) for r in AudioSessionRepository(s).list_by_user(user_id, limit=limit)]
