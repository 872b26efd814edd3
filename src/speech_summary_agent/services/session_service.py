"""
Сервисный слой: сессии записи.

Назначение:
- старт сессии, приём чанков (decode -> STT -> append -> persist), стоп
- summary и перевод накопленного транскрипта через LLM
- единая точка бизнес-логики для REST и RPC поверхностей

Ошибки STT при приёме чанка не пробрасываются: чанк просто не даёт текста,
запись продолжается. Ошибки предусловий и LLM: явные исключения AppError.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from speech_summary_agent.common.config import Settings, get_settings
from speech_summary_agent.common.errors import (
    InvalidSessionError,
    ProviderError,
    SummaryGenerationFailedError,
    TranscriptTooShortError,
    TranslationFailedError,
    ValidationError,
)
from speech_summary_agent.common.ids import new_session_id
from speech_summary_agent.common.logging import get_project_logger
from speech_summary_agent.common.metrics import (
    record_chunk,
    record_session_operation,
    record_session_started,
)
from speech_summary_agent.common.utils import b64_decode, text_head
from speech_summary_agent.domain.session import SessionRecord
from speech_summary_agent.llm.orchestrator import LLMOrchestrator
from speech_summary_agent.processing.prompts import (
    build_messages,
    build_summary_prompt,
    build_translation_prompt,
)
from speech_summary_agent.services.providers import get_llm, get_stt_provider
from speech_summary_agent.services.session_locks import SessionLocks
from speech_summary_agent.storage.session_store import SessionStore, build_session_store
from speech_summary_agent.stt.base import STTProvider

log = get_project_logger()


@dataclass
class ChunkResult:
    chunk_number: str
    transcription: str
    complete_text: str
    transcription_call_count: int
    accumulated_byte_size: int


@dataclass
class StopResult:
    complete_text: str
    total_chunks: int
    transcription_call_count: int
    total_size: int


@dataclass
class SummaryResult:
    summary: str
    summary_type: str
    original_text: str


@dataclass
class TranslationResult:
    translation: str
    target_language: str


class SessionService:
    def __init__(
        self,
        store: SessionStore,
        *,
        stt: STTProvider | None = None,
        llm: LLMOrchestrator | None = None,
        locks: SessionLocks | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.store = store
        self._stt = stt
        self._llm = llm
        self.locks = locks if locks is not None else SessionLocks()
        self._settings = settings

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    @property
    def stt(self) -> STTProvider:
        return self._stt or get_stt_provider()

    # -------------------------------------------------------------------------
    # helpers
    # -------------------------------------------------------------------------
    def _require(self, session_id: str) -> SessionRecord:
        record = self.store.get(session_id) if session_id else None
        if record is None:
            log.warning("session_invalid", extra={"payload": {"session_id": session_id}})
            raise InvalidSessionError(session_id)
        return record

    def _generate_text(self, prompt: str, *, purpose: str) -> str | None:
        try:
            llm = self._llm or get_llm()
        except ProviderError as e:
            log.error(
                "llm_not_configured",
                extra={"payload": {"purpose": purpose, "message": e.message}},
            )
            return None
        return llm.generate_text(build_messages(prompt), purpose=purpose)

    # -------------------------------------------------------------------------
    # operations
    # -------------------------------------------------------------------------
    def start_session(self, *, user_id: str | None = None) -> str:
        record = SessionRecord(session_id=new_session_id(), user_id=user_id)
        self.store.create(record)
        record_session_started()
        log.info(
            "session_started",
            extra={"payload": {"session_id": record.session_id, "user_id": user_id}},
        )
        return record.session_id

    def upload_chunk(self, session_id: str, chunk_number: str, audio: bytes) -> ChunkResult:
        self._require(session_id)
        size = len(audio)

        with self.locks.hold(session_id):
            stt_result = self.stt.transcribe_chunk(audio=audio)
            fragment = (stt_result.text or "").strip() if stt_result else ""

            current = self._require(session_id)
            updated = current.with_chunk(fragment=fragment, size_bytes=size)
            self.store.update(updated)

        record_chunk(transcribed=bool(fragment), size_bytes=size)
        log.info(
            "chunk_processed",
            extra={
                "payload": {
                    "session_id": session_id,
                    "chunk_number": chunk_number,
                    "bytes": size,
                    "chars": len(fragment),
                    "stt_calls": updated.transcription_call_count,
                    "accumulated_size": updated.accumulated_byte_size,
                }
            },
        )
        return ChunkResult(
            chunk_number=chunk_number,
            transcription=fragment,
            complete_text=updated.transcript,
            transcription_call_count=updated.transcription_call_count,
            accumulated_byte_size=updated.accumulated_byte_size,
        )

    def upload_chunk_b64(self, session_id: str, chunk_number: str, audio_b64: str) -> ChunkResult:
        self._require(session_id)
        try:
            audio = b64_decode(audio_b64)
        except ValueError as e:
            raise ValidationError("audioData is not valid base64") from e
        return self.upload_chunk(session_id, chunk_number, audio)

    def stop_session(self, session_id: str) -> StopResult:
        record = self._require(session_id)
        log.info(
            "session_stopped",
            extra={
                "payload": {
                    "session_id": session_id,
                    "chars": len(record.transcript),
                    "stt_calls": record.transcription_call_count,
                    "total_size": record.accumulated_byte_size,
                }
            },
        )
        # чанки отдельно не считаем: total_chunks всегда 0
        return StopResult(
            complete_text=record.transcript,
            total_chunks=0,
            transcription_call_count=record.transcription_call_count,
            total_size=record.accumulated_byte_size,
        )

    def generate_summary(
        self,
        session_id: str,
        summary_type: str = "medium",
        summary_language: str = "en",
    ) -> SummaryResult:
        summary_type = summary_type or "medium"
        summary_language = summary_language or "en"
        record = self._require(session_id)
        transcript = record.transcript

        required = int(self.settings.summary_min_transcript_chars)
        length = len(transcript.strip())
        if length < required:
            record_session_operation(operation="summary", result="too_short")
            raise TranscriptTooShortError(
                "Transcript too short for summary generation", length=length, required=required
            )

        log.info(
            "summary_requested",
            extra={
                "payload": {
                    "session_id": session_id,
                    "summary_type": summary_type,
                    "language": summary_language,
                }
            },
        )
        prompt = build_summary_prompt(summary_type, transcript, summary_language)
        summary = self._generate_text(prompt, purpose="summary")
        if not summary:
            record_session_operation(operation="summary", result="failed")
            raise SummaryGenerationFailedError({"session_id": session_id})

        with self.locks.hold(session_id):
            current = self._require(session_id)
            self.store.update(
                current.with_summary(
                    summary=summary, summary_type=summary_type, language=summary_language
                )
            )

        record_session_operation(operation="summary", result="ok")
        log.info(
            "summary_generated",
            extra={
                "payload": {
                    "session_id": session_id,
                    "summary_type": summary_type,
                    "chars": len(summary),
                }
            },
        )
        return SummaryResult(summary=summary, summary_type=summary_type, original_text=transcript)

    def translate(self, session_id: str, target_language: str) -> TranslationResult:
        record = self._require(session_id)
        transcript = record.transcript

        required = int(self.settings.translation_min_transcript_chars)
        length = len(transcript.strip())
        if length < required:
            record_session_operation(operation="translation", result="too_short")
            raise TranscriptTooShortError(
                "Transcript too short for translation", length=length, required=required
            )

        log.info(
            "translation_requested",
            extra={
                "payload": {
                    "session_id": session_id,
                    "target_language": target_language,
                    "has_previous": bool(record.translation),
                    "text_head": text_head(transcript, 100),
                }
            },
        )
        prompt = build_translation_prompt(
            transcript,
            target_language,
            record.translation or None,
            default_language_name=self.settings.translation_default_language_name,
        )
        translation = self._generate_text(prompt, purpose="translation")
        if not translation:
            record_session_operation(operation="translation", result="failed")
            raise TranslationFailedError({"session_id": session_id})

        with self.locks.hold(session_id):
            current = self._require(session_id)
            self.store.update(
                current.with_translation(translation=translation, language=target_language)
            )

        record_session_operation(operation="translation", result="ok")
        log.info(
            "translation_generated",
            extra={
                "payload": {
                    "session_id": session_id,
                    "target_language": target_language,
                    "text_head": text_head(translation, 100),
                }
            },
        )
        return TranslationResult(translation=translation, target_language=target_language)

    def get_session(self, session_id: str) -> SessionRecord:
        return self._require(session_id)

    def list_sessions(self, user_id: str, *, limit: int = 50) -> list[SessionRecord]:
        return self.store.list_by_user(user_id, limit=limit)


_service: SessionService | None = None
_service_lock = threading.Lock()


def get_session_service() -> SessionService:
    global _service
    with _service_lock:
        if _service is None:
            _service = SessionService(build_session_store())
        return _service
