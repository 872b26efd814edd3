"""
Хранилище сессий записи.

Один контракт (get/create/update/list_by_user) и три реализации:
- memory: словарь в процессе (dev/тесты, теряется при рестарте)
- db    : SQLAlchemy (Postgres), таблица audio_sessions
- redis : JSON-записи с TTL

Выбор реализации: настройка SESSION_STORE, а не отдельная ветка кода.
"""

from __future__ import annotations

from typing import Protocol

from speech_summary_agent.common.config import get_settings
from speech_summary_agent.common.logging import get_project_logger
from speech_summary_agent.domain.session import SessionRecord

log = get_project_logger()


class SessionStore(Protocol):
    def get(self, session_id: str) -> SessionRecord | None: ...

    def create(self, record: SessionRecord) -> SessionRecord: ...

    def update(self, record: SessionRecord) -> SessionRecord: ...

    def list_by_user(self, user_id: str, *, limit: int = 50) -> list[SessionRecord]: ...


def build_session_store() -> SessionStore:
    s = get_settings()
    backend = (s.session_store or "memory").strip().lower()

    if backend == "db":
        from speech_summary_agent.storage.db import init_db
        from speech_summary_agent.storage.repositories import SqlSessionStore

        if s.db_auto_create:
            init_db()
        store: SessionStore = SqlSessionStore()
    elif backend == "redis":
        from speech_summary_agent.storage.redis_store import RedisSessionStore

        store = RedisSessionStore()
    elif backend == "memory":
        from speech_summary_agent.storage.memory import InMemorySessionStore

        store = InMemorySessionStore()
    else:
        raise RuntimeError(f"Unsupported SESSION_STORE={backend}")

    log.info("session_store_ready", extra={"payload": {"backend": backend}})
    return store
