"""
REST API записи речи (/api/...).

Ответы в snake_case с флагом success; ошибки: {success: false, error, code}.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import JSONResponse

from apps.api_gateway.deps import auth_dep, service_dep
from speech_summary_agent.common.errors import AppError, ErrCode, ProviderCallFailedError
from speech_summary_agent.common.security import AuthContext
from speech_summary_agent.contracts.http_api import (
    ErrorResponse,
    GenerateSummaryRequest,
    GenerateSummaryResponse,
    StartSessionResponse,
    StopSessionRequest,
    StopSessionResponse,
    TranslateRequest,
    TranslateResponse,
    UploadChunkResponse,
)
from speech_summary_agent.services.session_service import SessionService

router = APIRouter()
AUTH_DEP = Depends(auth_dep)
SERVICE_DEP = Depends(service_dep)


def _error(status_code: int, message: str, code: str) -> JSONResponse:
    body = ErrorResponse(error=message, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _app_error(e: AppError) -> JSONResponse:
    if isinstance(e, ProviderCallFailedError):
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, e.message, e.code)
    return _error(status.HTTP_400_BAD_REQUEST, e.message, e.code)


@router.post("/start-session", response_model=StartSessionResponse)
def start_session(
    ctx: AuthContext = AUTH_DEP,
    service: SessionService = SERVICE_DEP,
) -> StartSessionResponse:
    session_id = service.start_session(user_id=ctx.subject)
    return StartSessionResponse(session_id=session_id)


@router.post(
    "/upload-chunk",
    response_model=UploadChunkResponse,
    responses={400: {"model": ErrorResponse}},
)
def upload_chunk(
    audio: UploadFile | None = File(default=None),
    session_id: str | None = Form(default=None),
    chunk_number: str | None = Form(default=None),
    session_id_q: str | None = Query(default=None, alias="session_id"),
    chunk_number_q: str | None = Query(default=None, alias="chunk_number"),
    _=AUTH_DEP,
    service: SessionService = SERVICE_DEP,
):
    sid = session_id or session_id_q or ""
    number = chunk_number or chunk_number_q or "0"

    try:
        service.get_session(sid)
    except AppError as e:
        return _app_error(e)

    if audio is None:
        return _error(status.HTTP_400_BAD_REQUEST, "No audio file provided", ErrCode.VALIDATION)

    try:
        result = service.upload_chunk(sid, number, audio.file.read())
    except AppError as e:
        return _app_error(e)

    return UploadChunkResponse(
        chunk_number=result.chunk_number,
        transcription=result.transcription,
        complete_text=result.complete_text,
        deepgram_calls=result.transcription_call_count,
        accumulated_size=result.accumulated_byte_size,
    )


@router.post(
    "/stop-session",
    response_model=StopSessionResponse,
    responses={400: {"model": ErrorResponse}},
)
def stop_session(
    req: StopSessionRequest,
    _=AUTH_DEP,
    service: SessionService = SERVICE_DEP,
):
    try:
        result = service.stop_session(req.session_id)
    except AppError as e:
        return _app_error(e)

    return StopSessionResponse(
        complete_text=result.complete_text,
        total_chunks=result.total_chunks,
        deepgram_calls=result.transcription_call_count,
        total_size=result.total_size,
    )


@router.post(
    "/generate-summary",
    response_model=GenerateSummaryResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def generate_summary(
    req: GenerateSummaryRequest,
    _=AUTH_DEP,
    service: SessionService = SERVICE_DEP,
):
    try:
        result = service.generate_summary(req.session_id, req.summary_type, req.summary_language)
    except AppError as e:
        return _app_error(e)

    return GenerateSummaryResponse(
        summary=result.summary,
        summary_type=result.summary_type,
        original_text=result.original_text,
    )


@router.post(
    "/translate",
    response_model=TranslateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def translate(
    req: TranslateRequest,
    _=AUTH_DEP,
    service: SessionService = SERVICE_DEP,
):
    try:
        result = service.translate(req.session_id, req.target_language)
    except AppError as e:
        return _app_error(e)

    return TranslateResponse(
        translation=result.translation,
        target_language=result.target_language,
    )
