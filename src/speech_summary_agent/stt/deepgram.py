"""
Deepgram STT (pre-recorded /v1/listen).

Запрос: сырые байты чанка (audio/webm) + query-параметры модели.
Ответ: results.channels[0].alternatives[0].transcript.

Любая проблема (нет ключа, слишком маленький чанк, HTTP ошибка,
пустой ответ) -> None. Наружу исключения не выходят.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

from speech_summary_agent.common.config import get_settings
from speech_summary_agent.common.logging import get_provider_logger
from speech_summary_agent.common.metrics import record_provider_call, track_provider_latency
from speech_summary_agent.common.utils import text_head

from .base import STTResult

log = get_provider_logger()


def _flag(value: bool) -> str:
    return "true" if value else "false"


@dataclass
class DeepgramConfig:
    api_key: str | None
    url: str = "https://api.deepgram.com/v1/listen"
    model: str = "nova-2"
    language: str = "en"
    smart_format: bool = True
    punctuate: bool = True
    diarize: bool = False
    content_type: str = "audio/webm"
    timeout_s: int = 30
    min_audio_bytes: int = 1000

    @classmethod
    def from_settings(cls) -> DeepgramConfig:
        s = get_settings()
        return cls(
            api_key=(s.deepgram_api_key or "").strip() or None,
            url=s.deepgram_url,
            model=s.deepgram_model,
            language=s.deepgram_language,
            smart_format=bool(s.deepgram_smart_format),
            punctuate=bool(s.deepgram_punctuate),
            diarize=bool(s.deepgram_diarize),
            content_type=s.deepgram_content_type,
            timeout_s=int(s.deepgram_timeout_sec or 30),
            min_audio_bytes=int(s.stt_min_audio_bytes),
        )

    def query_params(self) -> dict[str, str]:
        return {
            "model": self.model,
            "smart_format": _flag(self.smart_format),
            "language": self.language,
            "punctuate": _flag(self.punctuate),
            "diarize": _flag(self.diarize),
        }


def extract_transcript(data: Any) -> str | None:
    """Первый канал, первая альтернатива; пустая строка -> None."""
    if not isinstance(data, dict):
        return None
    channels = (data.get("results") or {}).get("channels") or []
    if not channels or not isinstance(channels[0], dict):
        return None
    alternatives = channels[0].get("alternatives") or []
    if not alternatives or not isinstance(alternatives[0], dict):
        return None
    transcript = alternatives[0].get("transcript") or ""
    if not isinstance(transcript, str) or not transcript.strip():
        return None
    return transcript.strip()


def _extract_confidence(data: dict[str, Any]) -> float | None:
    try:
        value = data["results"]["channels"][0]["alternatives"][0].get("confidence")
    except (KeyError, IndexError, TypeError, AttributeError):
        return None
    return float(value) if isinstance(value, int | float) else None


class DeepgramSTTProvider:
    name = "deepgram"

    def __init__(self, cfg: DeepgramConfig | None = None) -> None:
        self.cfg = cfg or DeepgramConfig.from_settings()

    def transcribe_chunk(self, *, audio: bytes) -> STTResult | None:
        size = len(audio)
        if not self.cfg.api_key:
            log.error("stt_api_key_missing", extra={"payload": {"provider": self.name}})
            record_provider_call(provider=self.name, result="skipped")
            return None

        if size < self.cfg.min_audio_bytes:
            log.warning(
                "stt_audio_too_small",
                extra={"payload": {"bytes": size, "min_bytes": self.cfg.min_audio_bytes}},
            )
            record_provider_call(provider=self.name, result="skipped")
            return None

        headers = {
            "Authorization": f"Token {self.cfg.api_key}",
            "Content-Type": self.cfg.content_type,
        }
        try:
            with track_provider_latency(self.name):
                resp = requests.post(
                    self.cfg.url,
                    params=self.cfg.query_params(),
                    headers=headers,
                    data=audio,
                    timeout=self.cfg.timeout_s,
                )
        except requests.RequestException as e:
            log.error(
                "stt_failed",
                extra={"payload": {"provider": self.name, "bytes": size, "err": str(e)[:200]}},
            )
            record_provider_call(provider=self.name, result="failed")
            return None

        if resp.status_code != 200:
            log.error(
                "stt_failed",
                extra={
                    "payload": {
                        "provider": self.name,
                        "bytes": size,
                        "status": resp.status_code,
                        "text_head": resp.text[:200],
                    }
                },
            )
            record_provider_call(provider=self.name, result="failed")
            return None

        try:
            data = resp.json()
        except ValueError as e:
            log.error(
                "stt_failed",
                extra={"payload": {"provider": self.name, "bytes": size, "err": str(e)[:200]}},
            )
            record_provider_call(provider=self.name, result="failed")
            return None

        text = extract_transcript(data)
        if text is None:
            log.info("stt_empty", extra={"payload": {"provider": self.name, "bytes": size}})
            record_provider_call(provider=self.name, result="empty")
            return None

        log.info(
            "stt_transcribed",
            extra={
                "payload": {
                    "provider": self.name,
                    "bytes": size,
                    "chars": len(text),
                    "text_head": text_head(text),
                }
            },
        )
        record_provider_call(provider=self.name, result="ok")
        return STTResult(text=text, confidence=_extract_confidence(data))
