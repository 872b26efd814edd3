from __future__ import annotations

import requests

from speech_summary_agent.common.errors import ErrCode, ProviderError
from speech_summary_agent.llm.mock import MockLLMProvider
from speech_summary_agent.llm.openai_compat import OpenAICompatConfig, OpenAICompatProvider
from speech_summary_agent.llm.orchestrator import LLMOrchestrator

MESSAGES = [{"role": "user", "content": "summarize"}]


class _Resp:
    def __init__(self, status_code: int = 200, data=None, text: str = "") -> None:
        self.status_code = status_code
        self._data = data
        self.text = text

    def json(self):
        if isinstance(self._data, Exception):
            raise self._data
        return self._data


def _provider() -> OpenAICompatProvider:
    return OpenAICompatProvider(
        OpenAICompatConfig(api_base="https://llm.local/v1/", api_key="sk-test", model="m1")
    )


def test_orchestrator_returns_text() -> None:
    llm = MockLLMProvider(reply="done")
    assert LLMOrchestrator(llm).generate_text(MESSAGES) == "done"
    assert llm.calls == [MESSAGES]


def test_orchestrator_converts_provider_error_to_none() -> None:
    llm = MockLLMProvider(reply=ProviderError(ErrCode.LLM_PROVIDER_ERROR, "boom"))
    assert LLMOrchestrator(llm).generate_text(MESSAGES, purpose="summary") is None


def test_orchestrator_rejects_non_string_or_empty_content() -> None:
    assert LLMOrchestrator(MockLLMProvider(reply=None)).generate_text(MESSAGES) is None
    assert LLMOrchestrator(MockLLMProvider(reply="")).generate_text(MESSAGES) is None
    parts = [{"type": "text", "text": "x"}]
    assert LLMOrchestrator(MockLLMProvider(reply=parts)).generate_text(MESSAGES) is None


def test_openai_compat_posts_chat_completions(monkeypatch) -> None:
    captured = {}

    def fake_post(url, headers=None, json=None, timeout=None):
        captured.update(url=url, headers=headers, json=json, timeout=timeout)
        return _Resp(200, {"choices": [{"message": {"role": "assistant", "content": "ok"}}]})

    monkeypatch.setattr("speech_summary_agent.llm.openai_compat.requests.post", fake_post)

    assert _provider().complete_messages(MESSAGES) == "ok"
    assert captured["url"] == "https://llm.local/v1/chat/completions"
    assert captured["headers"]["Authorization"] == "Bearer sk-test"
    assert captured["json"] == {"model": "m1", "messages": MESSAGES}
    assert captured["timeout"] == 60


def test_openai_compat_http_failure_through_orchestrator(monkeypatch) -> None:
    monkeypatch.setattr(
        "speech_summary_agent.llm.openai_compat.requests.post",
        lambda *a, **k: _Resp(500, None, text="internal"),
    )
    assert LLMOrchestrator(_provider()).generate_text(MESSAGES) is None


def test_openai_compat_network_failure_through_orchestrator(monkeypatch) -> None:
    def boom(*args, **kwargs):
        raise requests.Timeout("slow")

    monkeypatch.setattr("speech_summary_agent.llm.openai_compat.requests.post", boom)
    assert LLMOrchestrator(_provider()).generate_text(MESSAGES) is None


def test_openai_compat_missing_choices_through_orchestrator(monkeypatch) -> None:
    monkeypatch.setattr(
        "speech_summary_agent.llm.openai_compat.requests.post",
        lambda *a, **k: _Resp(200, {"choices": []}),
    )
    assert LLMOrchestrator(_provider()).generate_text(MESSAGES) is None
