from __future__ import annotations

from datetime import timedelta

import pytest

from speech_summary_agent.common.config import get_settings
from speech_summary_agent.common.errors import AppError
from speech_summary_agent.common.time import utc_now
from speech_summary_agent.domain.session import SessionRecord
from speech_summary_agent.storage.memory import InMemorySessionStore
from speech_summary_agent.storage.redis_store import RedisSessionStore
from speech_summary_agent.storage.session_store import build_session_store


class _FakeRedis:
    def __init__(self) -> None:
        self._store: dict[str, str] = {}
        self._zsets: dict[str, dict[str, float]] = {}
        self.ttl: dict[str, int] = {}

    def set(
        self,
        key: str,
        value: str,
        ex: int | None = None,
        nx: bool | None = None,
        xx: bool | None = None,
        keepttl: bool | None = None,
    ) -> bool | None:
        if nx and key in self._store:
            return None
        if xx and key not in self._store:
            return None
        self._store[key] = value
        if ex is not None:
            self.ttl[key] = ex
        elif not keepttl:
            self.ttl.pop(key, None)
        return True

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def zadd(self, key: str, mapping: dict[str, float]) -> int:
        self._zsets.setdefault(key, {}).update(mapping)
        return len(mapping)

    def expire(self, key: str, seconds: int) -> bool:
        self.ttl[key] = seconds
        return True

    def zrevrange(self, key: str, start: int, end: int) -> list[str]:
        items = sorted(self._zsets.get(key, {}).items(), key=lambda kv: kv[1], reverse=True)
        return [k for k, _ in items][start : end + 1]


def _record(session_id: str, user_id: str | None = "u1", age_sec: int = 0) -> SessionRecord:
    ts = utc_now() - timedelta(seconds=age_sec)
    return SessionRecord(session_id=session_id, user_id=user_id, created_at=ts, updated_at=ts)


def test_memory_store_returns_copies() -> None:
    store = InMemorySessionStore()
    store.create(_record("s1"))

    got = store.get("s1")
    got.transcript = "changed outside"
    assert store.get("s1").transcript == ""

    store.update(got)
    assert store.get("s1").transcript == "changed outside"


def test_memory_store_rejects_duplicate_and_missing() -> None:
    store = InMemorySessionStore()
    store.create(_record("s1"))
    with pytest.raises(AppError):
        store.create(_record("s1"))
    with pytest.raises(AppError):
        store.update(_record("s2"))
    assert store.get("s2") is None


def test_memory_store_lists_newest_first() -> None:
    store = InMemorySessionStore()
    store.create(_record("old", age_sec=60))
    store.create(_record("new", age_sec=0))
    store.create(_record("other", user_id="u2"))
    assert [r.session_id for r in store.list_by_user("u1")] == ["new", "old"]
    assert [r.session_id for r in store.list_by_user("u1", limit=1)] == ["new"]


def test_redis_store_roundtrip_keeps_ttl() -> None:
    client = _FakeRedis()
    store = RedisSessionStore(client=client, ttl_sec=120)

    rec = _record("s1")
    store.create(rec)
    assert client.ttl["session:s1"] == 120

    updated = rec.with_chunk(fragment="hello", size_bytes=2048)
    store.update(updated)
    assert client.ttl["session:s1"] == 120

    got = store.get("s1")
    assert got.transcript == "hello"
    assert got.transcription_call_count == 1
    assert got.accumulated_byte_size == 2048
    assert got.created_at == rec.created_at


def test_redis_store_rejects_duplicate_and_missing() -> None:
    store = RedisSessionStore(client=_FakeRedis(), ttl_sec=60)
    store.create(_record("s1"))
    with pytest.raises(AppError):
        store.create(_record("s1"))
    with pytest.raises(AppError):
        store.update(_record("nope"))


def test_redis_store_lists_by_user() -> None:
    store = RedisSessionStore(client=_FakeRedis(), ttl_sec=60)
    store.create(_record("old", age_sec=60))
    store.create(_record("new"))
    store.create(_record("anon", user_id=None))
    assert [r.session_id for r in store.list_by_user("u1")] == ["new", "old"]


def test_build_session_store_memory_and_unknown() -> None:
    s = get_settings()
    snapshot = s.session_store
    try:
        s.session_store = "memory"
        assert isinstance(build_session_store(), InMemorySessionStore)
        s.session_store = "cassandra"
        with pytest.raises(RuntimeError):
            build_session_store()
    finally:
        s.session_store = snapshot
