from __future__ import annotations

from speech_summary_agent.common.errors import ProviderError
from speech_summary_agent.common.logging import get_provider_logger
from speech_summary_agent.common.metrics import record_provider_call, track_provider_latency

from .base import ChatMessage, LLMProvider

log = get_provider_logger()


class LLMOrchestrator:
    """Единая точка вызова LLM: текст или None.

    Здесь нет логики провайдера и нет ретраев: один вызов, ошибка -> None.
    Контент засчитывается, только если это непустая строка.
    """

    def __init__(self, provider: LLMProvider) -> None:
        self.provider = provider

    def generate_text(self, messages: list[ChatMessage], *, purpose: str = "text") -> str | None:
        name = getattr(self.provider, "name", "llm")
        try:
            with track_provider_latency(name):
                content = self.provider.complete_messages(messages)
        except ProviderError as e:
            log.error(
                "llm_call_failed",
                extra={
                    "payload": {
                        "provider": name,
                        "purpose": purpose,
                        "code": e.code,
                        "message": e.message,
                        "details": e.details or {},
                    }
                },
            )
            record_provider_call(provider=name, result="failed")
            return None

        if not isinstance(content, str) or not content:
            log.warning(
                "llm_empty_content",
                extra={
                    "payload": {
                        "provider": name,
                        "purpose": purpose,
                        "content_type": type(content).__name__,
                    }
                },
            )
            record_provider_call(provider=name, result="empty")
            return None

        record_provider_call(provider=name, result="ok")
        return content
