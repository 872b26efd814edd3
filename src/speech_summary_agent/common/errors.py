"""
Единые ошибки и коды ошибок.

Назначение:
- предсказуемые коды для REST и RPC поверхностей
- единый стиль исключений по проекту
"""

from __future__ import annotations

from dataclasses import dataclass


class ErrCode:
    # Общие
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"

    # Сессии
    INVALID_SESSION = "invalid_session"
    TRANSCRIPT_TOO_SHORT = "transcript_too_short"

    # Провайдеры
    SUMMARY_GENERATION_FAILED = "summary_generation_failed"
    TRANSLATION_FAILED = "translation_failed"
    LLM_PROVIDER_ERROR = "llm_provider_error"

    # Инфра/хранилища
    STORAGE_ERROR = "storage_error"


@dataclass
class AppError(Exception):
    """
    Базовая ошибка приложения.
    - code: стабильный код ошибки
    - message: безопасное сообщение (уходит клиенту)
    - details: доп. данные (без секретов/PII)
    """

    code: str
    message: str
    details: dict | None = None

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}"


class ValidationError(AppError):
    def __init__(self, message: str = "Ошибка валидации", details: dict | None = None) -> None:
        super().__init__(ErrCode.VALIDATION, message, details)


class UnauthorizedError(AppError):
    def __init__(self, message: str = "Не авторизован", details: dict | None = None) -> None:
        super().__init__(ErrCode.UNAUTHORIZED, message, details)


class InvalidSessionError(AppError):
    def __init__(self, session_id: str | None = None) -> None:
        super().__init__(
            ErrCode.INVALID_SESSION,
            "Invalid session ID",
            {"session_id": session_id} if session_id else None,
        )


class TranscriptTooShortError(AppError):
    def __init__(self, message: str, *, length: int, required: int) -> None:
        super().__init__(
            ErrCode.TRANSCRIPT_TOO_SHORT,
            message,
            {"length": length, "required": required},
        )


class ProviderCallFailedError(AppError):
    """Внешний провайдер ничего не вернул (или упал) на summary/translation."""

    def __init__(self, code: str, message: str, details: dict | None = None) -> None:
        super().__init__(code, message, details)


class SummaryGenerationFailedError(ProviderCallFailedError):
    def __init__(self, details: dict | None = None) -> None:
        super().__init__(ErrCode.SUMMARY_GENERATION_FAILED, "Failed to generate summary", details)


class TranslationFailedError(ProviderCallFailedError):
    def __init__(self, details: dict | None = None) -> None:
        super().__init__(ErrCode.TRANSLATION_FAILED, "Failed to translate text", details)


class ProviderError(AppError):
    """Внутренняя ошибка адаптера провайдера. Наружу из адаптеров не выходит."""

    def __init__(self, code: str, message: str, details: dict | None = None) -> None:
        super().__init__(code, message, details)
