"""
In-memory хранилище сессий.

Tradeoff: только один процесс, данные теряются при рестарте.
Записи отдаются копиями, чтобы изменения шли только через update().
"""

from __future__ import annotations

import threading
from dataclasses import replace

from speech_summary_agent.common.errors import AppError, ErrCode
from speech_summary_agent.domain.session import SessionRecord


class InMemorySessionStore:
    def __init__(self) -> None:
        self._items: dict[str, SessionRecord] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> SessionRecord | None:
        with self._lock:
            record = self._items.get(session_id)
            return replace(record) if record else None

    def create(self, record: SessionRecord) -> SessionRecord:
        with self._lock:
            if record.session_id in self._items:
                raise AppError(ErrCode.STORAGE_ERROR, "Session already exists")
            self._items[record.session_id] = replace(record)
        return record

    def update(self, record: SessionRecord) -> SessionRecord:
        with self._lock:
            if record.session_id not in self._items:
                raise AppError(ErrCode.STORAGE_ERROR, "Session does not exist")
            self._items[record.session_id] = replace(record)
        return record

    def list_by_user(self, user_id: str, *, limit: int = 50) -> list[SessionRecord]:
        with self._lock:
            items = [replace(r) for r in self._items.values() if r.user_id == user_id]
        items.sort(key=lambda r: r.created_at, reverse=True)
        return items[: max(1, min(limit, 500))]
