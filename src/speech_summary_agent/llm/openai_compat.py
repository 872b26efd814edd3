from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

from speech_summary_agent.common.config import get_settings
from speech_summary_agent.common.errors import ErrCode, ProviderError
from speech_summary_agent.common.logging import get_provider_logger

from .base import ChatMessage, LLMProvider

log = get_provider_logger()


@dataclass
class OpenAICompatConfig:
    """Настройки OpenAI-compatible API."""

    api_base: str
    api_key: str
    model: str = "gpt-4o-mini"
    timeout_s: int = 60
    temperature: float | None = None
    max_tokens: int | None = None


class OpenAICompatProvider(LLMProvider):
    """Минимальный провайдер LLM через OpenAI-compatible /chat/completions."""

    name = "openai_compat"

    def __init__(self, cfg: OpenAICompatConfig | None = None) -> None:
        if cfg is None:
            s = get_settings()
            api_base = (s.openai_api_base or "").strip()
            api_key = (s.openai_api_key or "").strip()
            if not api_base:
                raise ProviderError(ErrCode.LLM_PROVIDER_ERROR, "OPENAI_API_BASE не задан")
            if not api_key:
                raise ProviderError(ErrCode.LLM_PROVIDER_ERROR, "OPENAI_API_KEY не задан")
            cfg = OpenAICompatConfig(
                api_base=api_base,
                api_key=api_key,
                model=s.llm_model_id or "gpt-4o-mini",
                timeout_s=int(s.llm_request_timeout_sec or 60),
                temperature=s.llm_temperature,
                max_tokens=s.llm_max_tokens,
            )
        self.cfg = cfg

    def _payload(self, messages: list[ChatMessage]) -> dict[str, Any]:
        payload: dict[str, Any] = {"model": self.cfg.model, "messages": messages}
        if self.cfg.temperature is not None:
            payload["temperature"] = self.cfg.temperature
        if self.cfg.max_tokens is not None:
            payload["max_tokens"] = self.cfg.max_tokens
        return payload

    def complete_messages(self, messages: list[ChatMessage]) -> Any:
        url = self.cfg.api_base.rstrip("/") + "/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.cfg.api_key}",
            "Content-Type": "application/json",
        }

        try:
            resp = requests.post(
                url, headers=headers, json=self._payload(messages), timeout=self.cfg.timeout_s
            )
        except requests.RequestException as e:
            log.error(
                "llm_http_error",
                extra={"payload": {"provider": self.name, "err": str(e)[:200]}},
            )
            raise ProviderError(
                ErrCode.LLM_PROVIDER_ERROR,
                "Ошибка HTTP при вызове LLM",
                {"err": str(e)},
            ) from e

        if resp.status_code >= 400:
            raise ProviderError(
                ErrCode.LLM_PROVIDER_ERROR,
                "LLM вернул ошибку",
                {"status": resp.status_code, "text_head": resp.text[:500]},
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderError(
                ErrCode.LLM_PROVIDER_ERROR,
                "LLM вернул невалидный JSON",
                {"err": str(e), "text_head": resp.text[:500]},
            ) from e

        try:
            return data["choices"][0]["message"].get("content")
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise ProviderError(
                ErrCode.LLM_PROVIDER_ERROR,
                "Не удалось извлечь текст из ответа LLM",
                {"err": str(e), "data_head": str(data)[:500]},
            ) from e
