from __future__ import annotations

import base64

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from apps.api_gateway.deps import service_dep
from apps.api_gateway.routers.rpc import router as rpc_router
from speech_summary_agent.common.config import get_settings
from speech_summary_agent.llm.mock import MockLLMProvider
from speech_summary_agent.llm.orchestrator import LLMOrchestrator
from speech_summary_agent.services.session_service import SessionService
from speech_summary_agent.storage.memory import InMemorySessionStore
from speech_summary_agent.stt.mock import MockSTTProvider

LONG_TEXT = "we reviewed the roadmap and agreed to ship the beta before the end of march"


@pytest.fixture()
def none_auth():
    s = get_settings()
    snapshot = (s.app_env, s.auth_mode)
    try:
        s.app_env = "dev"
        s.auth_mode = "none"
        yield s
    finally:
        s.app_env, s.auth_mode = snapshot


def _setup(*, script=None, reply="mock_text"):
    llm = MockLLMProvider(reply=reply)
    svc = SessionService(
        InMemorySessionStore(),
        stt=MockSTTProvider(script=script),
        llm=LLMOrchestrator(llm),
        settings=get_settings(),
    )
    app = FastAPI()
    app.include_router(rpc_router, prefix="/rpc")
    app.dependency_overrides[service_dep] = lambda: svc
    return TestClient(app), svc, llm


def _b64(size: int) -> str:
    return base64.b64encode(b"\x01" * size).decode()


def test_rpc_record_flow(none_auth) -> None:
    client, svc, _ = _setup(script=["hello world", "how are you"])

    start = client.post("/rpc/audio.startSession")
    assert start.status_code == 200
    sid = start.json()["sessionId"]
    assert start.json()["success"] is True
    assert start.json()["message"] == "Session started successfully"

    for n in ("0", "1"):
        resp = client.post(
            "/rpc/audio.uploadChunk",
            json={"sessionId": sid, "chunkNumber": n, "audioData": _b64(15000)},
        )
        assert resp.status_code == 200
        assert resp.json()["chunkNumber"] == n

    assert resp.json()["completeText"] == "hello world how are you"
    assert resp.json()["transcription"] == "how are you"

    stop = client.post("/rpc/audio.stopSession", json={"sessionId": sid})
    assert stop.json() == {
        "success": True,
        "completeText": "hello world how are you",
        "totalChunks": 0,
        "deepgramCalls": 2,
        "totalSize": 30000,
    }


def test_rpc_upload_bad_base64(none_auth) -> None:
    client, svc, _ = _setup()
    sid = svc.start_session()
    resp = client.post(
        "/rpc/audio.uploadChunk",
        json={"sessionId": sid, "chunkNumber": "0", "audioData": "%%%not-base64%%%"},
    )
    assert resp.status_code == 422
    assert resp.json()["detail"]["code"] == "validation"


def test_rpc_unknown_session_is_404(none_auth) -> None:
    client, _, _ = _setup()
    resp = client.post("/rpc/audio.stopSession", json={"sessionId": "missing"})
    assert resp.status_code == 404
    assert resp.json()["detail"] == {"code": "invalid_session", "message": "Invalid session ID"}


def test_rpc_summary_too_short(none_auth) -> None:
    client, svc, llm = _setup()
    sid = svc.start_session()
    resp = client.post("/rpc/audio.generateSummary", json={"sessionId": sid})
    assert resp.status_code == 422
    assert resp.json()["detail"]["code"] == "transcript_too_short"
    assert llm.calls == []


def test_rpc_summary_and_translate(none_auth) -> None:
    client, svc, llm = _setup(script=[LONG_TEXT], reply="Resumen")
    sid = svc.start_session()
    svc.upload_chunk(sid, "0", b"\x00" * 2000)

    summary = client.post(
        "/rpc/audio.generateSummary",
        json={"sessionId": sid, "summaryType": "detailed", "summaryLanguage": "es"},
    )
    assert summary.status_code == 200
    assert summary.json() == {
        "success": True,
        "summary": "Resumen",
        "summaryType": "detailed",
        "originalText": LONG_TEXT,
    }
    assert "Summarize in Spanish." in llm.last_prompt

    translation = client.post(
        "/rpc/audio.translate", json={"sessionId": sid, "targetLanguage": "es"}
    )
    assert translation.status_code == 200
    assert translation.json() == {
        "success": True,
        "translation": "Resumen",
        "targetLanguage": "es",
    }


def test_rpc_provider_failure_is_502(none_auth) -> None:
    client, svc, _ = _setup(script=[LONG_TEXT], reply=None)
    sid = svc.start_session()
    svc.upload_chunk(sid, "0", b"\x00" * 2000)

    resp = client.post("/rpc/audio.translate", json={"sessionId": sid, "targetLanguage": "ko"})
    assert resp.status_code == 502
    assert resp.json()["detail"]["code"] == "translation_failed"


def test_rpc_get_sessions_and_session(none_auth) -> None:
    client, svc, _ = _setup(script=["hi there"])
    sid = client.post("/rpc/audio.startSession").json()["sessionId"]
    svc.upload_chunk(sid, "0", b"\x00" * 2000)
    svc.start_session(user_id="someone-else")

    listed = client.get("/rpc/audio.getSessions")
    assert listed.status_code == 200
    assert [s["sessionId"] for s in listed.json()] == [sid]

    one = client.get("/rpc/audio.getSession", params={"sessionId": sid})
    assert one.status_code == 200
    body = one.json()
    assert body["transcript"] == "hi there"
    assert body["deepgramCalls"] == 1
    assert body["accumulatedSize"] == 2000
    assert body["userId"] == "anonymous"

    missing = client.get("/rpc/audio.getSession", params={"sessionId": "nope"})
    assert missing.status_code == 404


def test_rpc_missing_fields_rejected(none_auth) -> None:
    client, _, _ = _setup()
    resp = client.post("/rpc/audio.uploadChunk", json={"sessionId": "x"})
    assert resp.status_code == 422
