from __future__ import annotations

import threading

from speech_summary_agent.common.config import get_settings
from speech_summary_agent.common.logging import get_project_logger
from speech_summary_agent.llm.base import LLMProvider
from speech_summary_agent.llm.mock import MockLLMProvider
from speech_summary_agent.llm.orchestrator import LLMOrchestrator
from speech_summary_agent.stt.base import STTProvider
from speech_summary_agent.stt.mock import MockSTTProvider

log = get_project_logger()

_stt_provider: STTProvider | None = None
_llm: LLMOrchestrator | None = None
_lock = threading.Lock()


def build_stt_provider() -> STTProvider:
    provider = (get_settings().stt_provider or "").strip().lower()

    if provider == "mock":
        return MockSTTProvider()
    if provider == "deepgram":
        from speech_summary_agent.stt.deepgram import DeepgramSTTProvider

        return DeepgramSTTProvider()
    raise RuntimeError(f"Unsupported STT_PROVIDER={provider}")


def build_llm_provider() -> LLMProvider:
    provider = (get_settings().llm_provider or "").strip().lower()

    if provider == "mock":
        return MockLLMProvider()
    if provider == "openai_compat":
        from speech_summary_agent.llm.openai_compat import OpenAICompatProvider

        return OpenAICompatProvider()
    raise RuntimeError(f"Unsupported LLM_PROVIDER={provider}")


def get_stt_provider() -> STTProvider:
    global _stt_provider
    with _lock:
        if _stt_provider is None:
            _stt_provider = build_stt_provider()
            log.info("stt_provider_ready", extra={"payload": {"provider": _stt_provider.name}})
        return _stt_provider


def get_llm() -> LLMOrchestrator:
    global _llm
    with _lock:
        if _llm is None:
            _llm = LLMOrchestrator(build_llm_provider())
            log.info("llm_provider_ready", extra={"payload": {"provider": _llm.provider.name}})
        return _llm
