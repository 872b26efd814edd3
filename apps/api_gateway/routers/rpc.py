"""
RPC процедуры audio.* (/rpc/audio.<procedure>).

Вход и выход: camelCase JSON, валидация через pydantic.
Ошибки: HTTPException с detail {code, message}.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from apps.api_gateway.deps import auth_dep, service_dep
from speech_summary_agent.common.errors import (
    AppError,
    InvalidSessionError,
    ProviderCallFailedError,
)
from speech_summary_agent.common.security import AuthContext
from speech_summary_agent.contracts.rpc_api import (
    GenerateSummaryInput,
    GenerateSummaryOutput,
    SessionInput,
    SessionView,
    StartSessionOutput,
    StopSessionOutput,
    TranslateInput,
    TranslateOutput,
    UploadChunkInput,
    UploadChunkOutput,
)
from speech_summary_agent.domain.session import SessionRecord
from speech_summary_agent.services.session_service import SessionService

router = APIRouter()
AUTH_DEP = Depends(auth_dep)
SERVICE_DEP = Depends(service_dep)


def _http_error(e: AppError) -> HTTPException:
    if isinstance(e, InvalidSessionError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(e, ProviderCallFailedError):
        code = status.HTTP_502_BAD_GATEWAY
    else:
        code = status.HTTP_422_UNPROCESSABLE_ENTITY
    return HTTPException(status_code=code, detail={"code": e.code, "message": e.message})


def _view(record: SessionRecord) -> SessionView:
    return SessionView(
        session_id=record.session_id,
        user_id=record.user_id,
        transcript=record.transcript,
        deepgram_calls=record.transcription_call_count,
        accumulated_size=record.accumulated_byte_size,
        summary=record.summary,
        summary_type=record.summary_type,
        summary_language=record.summary_language,
        translation=record.translation,
        translation_language=record.translation_language,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


@router.post(
    "/audio.startSession", response_model=StartSessionOutput, response_model_by_alias=True
)
def rpc_start_session(
    ctx: AuthContext = AUTH_DEP,
    service: SessionService = SERVICE_DEP,
) -> StartSessionOutput:
    return StartSessionOutput(session_id=service.start_session(user_id=ctx.subject))


@router.post("/audio.uploadChunk", response_model=UploadChunkOutput, response_model_by_alias=True)
def rpc_upload_chunk(
    req: UploadChunkInput,
    _=AUTH_DEP,
    service: SessionService = SERVICE_DEP,
) -> UploadChunkOutput:
    try:
        result = service.upload_chunk_b64(req.session_id, req.chunk_number, req.audio_data)
    except AppError as e:
        raise _http_error(e) from e
    return UploadChunkOutput(
        chunk_number=result.chunk_number,
        transcription=result.transcription,
        complete_text=result.complete_text,
    )


@router.post("/audio.stopSession", response_model=StopSessionOutput, response_model_by_alias=True)
def rpc_stop_session(
    req: SessionInput,
    _=AUTH_DEP,
    service: SessionService = SERVICE_DEP,
) -> StopSessionOutput:
    try:
        result = service.stop_session(req.session_id)
    except AppError as e:
        raise _http_error(e) from e
    return StopSessionOutput(
        complete_text=result.complete_text,
        total_chunks=result.total_chunks,
        deepgram_calls=result.transcription_call_count,
        total_size=result.total_size,
    )


@router.post(
    "/audio.generateSummary", response_model=GenerateSummaryOutput, response_model_by_alias=True
)
def rpc_generate_summary(
    req: GenerateSummaryInput,
    _=AUTH_DEP,
    service: SessionService = SERVICE_DEP,
) -> GenerateSummaryOutput:
    try:
        result = service.generate_summary(req.session_id, req.summary_type, req.summary_language)
    except AppError as e:
        raise _http_error(e) from e
    return GenerateSummaryOutput(
        summary=result.summary,
        summary_type=result.summary_type,
        original_text=result.original_text,
    )


@router.post("/audio.translate", response_model=TranslateOutput, response_model_by_alias=True)
def rpc_translate(
    req: TranslateInput,
    _=AUTH_DEP,
    service: SessionService = SERVICE_DEP,
) -> TranslateOutput:
    try:
        result = service.translate(req.session_id, req.target_language)
    except AppError as e:
        raise _http_error(e) from e
    return TranslateOutput(translation=result.translation, target_language=result.target_language)


@router.get("/audio.getSessions", response_model=list[SessionView], response_model_by_alias=True)
def rpc_get_sessions(
    limit: int = Query(default=50, ge=1, le=500),
    ctx: AuthContext = AUTH_DEP,
    service: SessionService = SERVICE_DEP,
) -> list[SessionView]:
    return [_view(r) for r in service.list_sessions(ctx.subject, limit=limit)]


@router.get("/audio.getSession", response_model=SessionView, response_model_by_alias=True)
def rpc_get_session(
    session_id: str = Query(alias="sessionId", min_length=1),
    _=AUTH_DEP,
    service: SessionService = SERVICE_DEP,
) -> SessionView:
    try:
        record = service.get_session(session_id)
    except AppError as e:
        raise _http_error(e) from e
    return _view(record)

