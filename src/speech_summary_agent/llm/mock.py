"""
Mock LLM для тестов и dev.

Назначение:
- гонять summary/перевод без реальных вызовов LLM
- запоминать отправленные сообщения, чтобы проверять промпты
"""

from __future__ import annotations

from typing import Any

from .base import ChatMessage, LLMProvider


class MockLLMProvider(LLMProvider):
    name = "mock"

    def __init__(self, reply: Any = "mock_text") -> None:
        self.reply = reply
        self.calls: list[list[ChatMessage]] = []

    def complete_messages(self, messages: list[ChatMessage]) -> Any:
        self.calls.append(list(messages))
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply

    @property
    def last_prompt(self) -> str | None:
        if not self.calls:
            return None
        return self.calls[-1][-1]["content"]
