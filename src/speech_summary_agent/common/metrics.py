"""
Метрики Prometheus для сервиса.

Назначение:
- Экспорт /metrics
- Счётчики HTTP, вызовов провайдеров (STT/LLM), чанков и сессий
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import FastAPI, Request
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# =============================================================================
# СЧЁТЧИКИ И МЕТРИКИ
# =============================================================================

REQUESTS_TOTAL = Counter(
    "speech_requests_total",
    "Общее количество HTTP запросов",
    ["service", "route", "method", "status"],
)

HTTP_REQUEST_LATENCY_MS = Histogram(
    "speech_http_request_latency_ms",
    "Задержка HTTP запроса (мс)",
    ["service", "route", "method"],
    buckets=(5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000),
)

PROVIDER_CALLS_TOTAL = Counter(
    "speech_provider_calls_total",
    "Вызовы внешних провайдеров",
    ["provider", "result"],  # result=ok|empty|failed|skipped
)

PROVIDER_LATENCY_MS = Histogram(
    "speech_provider_latency_ms",
    "Задержка вызова внешнего провайдера (мс)",
    ["provider"],
    buckets=(50, 100, 250, 500, 1000, 2500, 5000, 10000, 30000, 60000),
)

CHUNKS_TOTAL = Counter(
    "speech_chunks_total",
    "Принятые аудио-чанки",
    ["result"],  # transcribed|empty
)

CHUNK_BYTES_TOTAL = Counter(
    "speech_chunk_bytes_total",
    "Суммарный объём принятого аудио (байт)",
)

SESSIONS_STARTED_TOTAL = Counter(
    "speech_sessions_started_total",
    "Количество начатых сессий записи",
)

SESSION_OPERATIONS_TOTAL = Counter(
    "speech_session_operations_total",
    "Операции над сессией",
    ["operation", "result"],  # operation=summary|translation
)


def record_provider_call(*, provider: str, result: str) -> None:
    PROVIDER_CALLS_TOTAL.labels(provider=provider, result=result).inc()


@contextmanager
def track_provider_latency(provider: str) -> Iterator[None]:
    started = time.perf_counter()
    try:
        yield
    finally:
        PROVIDER_LATENCY_MS.labels(provider=provider).observe(
            (time.perf_counter() - started) * 1000
        )


def record_chunk(*, transcribed: bool, size_bytes: int) -> None:
    CHUNKS_TOTAL.labels(result="transcribed" if transcribed else "empty").inc()
    CHUNK_BYTES_TOTAL.inc(max(0, size_bytes))


def record_session_started() -> None:
    SESSIONS_STARTED_TOTAL.inc()


def record_session_operation(*, operation: str, result: str) -> None:
    SESSION_OPERATIONS_TOTAL.labels(operation=operation, result=result).inc()


# =============================================================================
# ENDPOINT /metrics
# =============================================================================
def setup_metrics_endpoint(app: FastAPI, *, service: str = "api-gateway") -> None:
    """
    Регистрирует HTTP middleware и endpoint /metrics для Prometheus.
    """

    @app.middleware("http")
    async def http_metrics(request: Request, call_next):
        route = request.url.path
        method = request.method
        started = time.perf_counter()

        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        REQUESTS_TOTAL.labels(
            service=service,
            route=route,
            method=method,
            status=str(response.status_code),
        ).inc()
        HTTP_REQUEST_LATENCY_MS.labels(
            service=service,
            route=route,
            method=method,
        ).observe(elapsed_ms)
        return response

    @app.get("/metrics")
    def metrics() -> Response:
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
