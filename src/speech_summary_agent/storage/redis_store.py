"""
Redis-реализация SessionStore.

Ключи:
- session:<session_id>        -> JSON записи (TTL = REDIS_SESSION_TTL_SEC)
- user_sessions:<user_id>     -> ZSET session_id по времени создания

TTL: это и есть политика удаления сессий: явного destroy нет.
"""

from __future__ import annotations

import json

import redis

from speech_summary_agent.common.config import get_settings
from speech_summary_agent.common.errors import AppError, ErrCode
from speech_summary_agent.domain.session import SessionRecord

_client: redis.Redis | None = None


def redis_client() -> redis.Redis:
    """
    Singleton Redis client.
    """
    global _client
    if _client is None:
        _client = redis.Redis.from_url(get_settings().redis_url, decode_responses=True)
    return _client


def _session_key(session_id: str) -> str:
    return f"session:{session_id}"


def _user_key(user_id: str) -> str:
    return f"user_sessions:{user_id}"


class RedisSessionStore:
    def __init__(self, client: redis.Redis | None = None, ttl_sec: int | None = None) -> None:
        self._client = client
        self.ttl_sec = int(ttl_sec or get_settings().redis_session_ttl_sec)

    @property
    def client(self) -> redis.Redis:
        return self._client or redis_client()

    def get(self, session_id: str) -> SessionRecord | None:
        raw = self.client.get(_session_key(session_id))
        if not raw:
            return None
        return SessionRecord.from_dict(json.loads(raw))

    def create(self, record: SessionRecord) -> SessionRecord:
        ok = self.client.set(
            _session_key(record.session_id),
            json.dumps(record.to_dict(), ensure_ascii=False),
            nx=True,
            ex=self.ttl_sec,
        )
        if not ok:
            raise AppError(ErrCode.STORAGE_ERROR, "Session already exists")
        if record.user_id:
            key = _user_key(record.user_id)
            self.client.zadd(key, {record.session_id: record.created_at.timestamp()})
            self.client.expire(key, self.ttl_sec)
        return record

    def update(self, record: SessionRecord) -> SessionRecord:
        ok = self.client.set(
            _session_key(record.session_id),
            json.dumps(record.to_dict(), ensure_ascii=False),
            xx=True,
            keepttl=True,
        )
        if not ok:
            raise AppError(ErrCode.STORAGE_ERROR, "Session does not exist")
        return record

    def list_by_user(self, user_id: str, *, limit: int = 50) -> list[SessionRecord]:
        limit = max(1, min(limit, 500))
        ids = self.client.zrevrange(_user_key(user_id), 0, limit - 1)
        out: list[SessionRecord] = []
        for sid in ids:
            record = self.get(sid)
            if record is not None:
                out.append(record)
        return out
