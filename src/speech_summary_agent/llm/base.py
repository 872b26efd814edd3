"""
Базовые типы для LLM.

Провайдер принимает список role-tagged сообщений (chat-style)
и возвращает сырой content первого choice. Ошибки: через ProviderError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

ChatMessage = dict[str, str]


class LLMProvider(ABC):
    """
    Интерфейс провайдера LLM.
    """

    name: str = "llm"

    @abstractmethod
    def complete_messages(self, messages: list[ChatMessage]) -> Any:
        """
        Отправить сообщения, вернуть choices[0].message.content как есть
        (может быть не строкой: это проверяет оркестратор).
        """
        raise NotImplementedError
