"""
Логирование проекта.

- один handler в stdout на root-логгер
- LOG_FORMAT=json (по умолчанию) или text
- сообщение: короткое имя события, детали в extra={"payload": {...}}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime

from speech_summary_agent.common.config import get_settings

PROJECT_LOGGER = "speech-summary-agent"

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s %(payload)s"


class JsonFormatter(logging.Formatter):
    def __init__(self, service: str) -> None:
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "service": self.service,
            "logger": record.name,
            "event": record.getMessage(),
        }
        payload = getattr(record, "payload", None)
        if isinstance(payload, dict) and payload:
            entry["payload"] = payload
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class _PayloadDefault(logging.Filter):
    """Для текстового формата: у записей без payload подставляем пустую строку."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "payload"):
            record.payload = ""
        return True


def setup_logging() -> None:
    s = get_settings()
    level = logging.getLevelName((s.log_level or "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    if (s.log_format or "json").strip().lower() == "text":
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handler.addFilter(_PayloadDefault())
    else:
        handler.setFormatter(JsonFormatter(s.service_name))
    root.addHandler(handler)

    for name in ("uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)


def get_project_logger(name: str = PROJECT_LOGGER) -> logging.Logger:
    return logging.getLogger(name)


def get_provider_logger() -> logging.Logger:
    """Логгер вызовов STT/LLM: отдельное имя, чтобы фильтровать шум провайдеров."""
    return logging.getLogger(f"{PROJECT_LOGGER}.providers")
