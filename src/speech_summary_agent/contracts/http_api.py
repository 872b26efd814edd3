"""
REST API контракты (Pydantic-модели).

Назначение:
- валидация входа/выхода на уровне FastAPI
- стабильные snake_case структуры для браузерного клиента
"""

from __future__ import annotations

from pydantic import BaseModel, Field


# =============================================================================
# ЗАПРОСЫ
# =============================================================================
class StopSessionRequest(BaseModel):
    session_id: str = ""


class GenerateSummaryRequest(BaseModel):
    session_id: str = ""
    summary_type: str = Field(default="medium")
    summary_language: str = Field(default="en")


class TranslateRequest(BaseModel):
    session_id: str = ""
    target_language: str = Field(default="ja")


# =============================================================================
# ОТВЕТЫ
# =============================================================================
class StartSessionResponse(BaseModel):
    success: bool = True
    session_id: str
    message: str = "Session started successfully"


class UploadChunkResponse(BaseModel):
    success: bool = True
    chunk_number: str
    transcription: str
    complete_text: str
    deepgram_calls: int
    accumulated_size: int


class StopSessionResponse(BaseModel):
    success: bool = True
    complete_text: str
    total_chunks: int = 0
    deepgram_calls: int
    total_size: int


class GenerateSummaryResponse(BaseModel):
    success: bool = True
    summary: str
    summary_type: str
    original_text: str


class TranslateResponse(BaseModel):
    success: bool = True
    translation: str
    target_language: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    code: str
