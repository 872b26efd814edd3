"""
RPC контракты (camelCase JSON).

Процедуры вызываются как /rpc/audio.<procedure>; имена полей совпадают
с тем, что ожидает браузерный клиент.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RpcModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# ВХОД
# =============================================================================
class UploadChunkInput(RpcModel):
    session_id: str = Field(min_length=1)
    chunk_number: str = Field(min_length=1)
    audio_data: str = Field(min_length=1)  # base64


class SessionInput(RpcModel):
    session_id: str = Field(min_length=1)


class GenerateSummaryInput(RpcModel):
    session_id: str = Field(min_length=1)
    summary_type: str = "medium"
    summary_language: str = "en"


class TranslateInput(RpcModel):
    session_id: str = Field(min_length=1)
    target_language: str = Field(min_length=1)


# =============================================================================
# ВЫХОД
# =============================================================================
class StartSessionOutput(RpcModel):
    success: bool = True
    session_id: str
    message: str = "Session started successfully"


class UploadChunkOutput(RpcModel):
    success: bool = True
    chunk_number: str
    transcription: str
    complete_text: str


class StopSessionOutput(RpcModel):
    success: bool = True
    complete_text: str
    total_chunks: int = 0
    deepgram_calls: int
    total_size: int


class GenerateSummaryOutput(RpcModel):
    success: bool = True
    summary: str
    summary_type: str
    original_text: str


class TranslateOutput(RpcModel):
    success: bool = True
    translation: str
    target_language: str


class SessionView(RpcModel):
    session_id: str
    user_id: str | None = None
    transcript: str = ""
    deepgram_calls: int = 0
    accumulated_size: int = 0
    summary: str | None = None
    summary_type: str | None = None
    summary_language: str | None = None
    translation: str | None = None
    translation_language: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
