"""
API Gateway (FastAPI).

Функции:
- /health
- /metrics
- REST API записи речи (/api/...)
- RPC процедуры audio.* (/rpc/...)

Архитектурно:
- браузер шлёт аудио-чанки -> STT (Deepgram) -> транскрипт копится в сессии
- summary и перевод строятся по накопленному транскрипту через LLM
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apps.api_gateway.routers.audio import router as audio_router
from apps.api_gateway.routers.rpc import router as rpc_router
from speech_summary_agent.common.config import get_settings
from speech_summary_agent.common.logging import get_project_logger, setup_logging
from speech_summary_agent.common.metrics import setup_metrics_endpoint
from speech_summary_agent.common.security import is_prod_env
from speech_summary_agent.services.readiness_service import enforce_startup_readiness

log = get_project_logger()


def _parse_origins(raw: str) -> list[str]:
    origins = [o.strip() for o in (raw or "").split(",") if o.strip()]
    return origins or ["*"]


def _cors_params() -> tuple[list[str], bool]:
    settings = get_settings()
    allow_origins = _parse_origins(settings.cors_allowed_origins)
    allow_credentials = bool(settings.cors_allow_credentials)

    if is_prod_env(settings.app_env) and "*" in allow_origins:
        raise RuntimeError("CORS wildcard '*' запрещён в APP_ENV=prod")

    # '*' нельзя использовать вместе с credentials=true
    if "*" in allow_origins:
        allow_credentials = False

    return allow_origins, allow_credentials


def _create_app() -> FastAPI:
    app = FastAPI(title="Speech Summary Agent", version="0.1.0")
    allow_origins, allow_credentials = _cors_params()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=allow_credentials,
    )

    setup_metrics_endpoint(app)

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {"ok": True}

    app.include_router(audio_router, prefix="/api")
    app.include_router(rpc_router, prefix="/rpc")

    return app


setup_logging()
enforce_startup_readiness(service_name="api-gateway")
log.info(
    "api_gateway_ready",
    extra={
        "payload": {
            "session_store": get_settings().session_store,
            "stt_provider": get_settings().stt_provider,
            "llm_provider": get_settings().llm_provider,
        }
    },
)

app = _create_app()


def run() -> None:
    import uvicorn

    s = get_settings()
    uvicorn.run(app, host=s.api_host, port=int(s.api_port), log_config=None)
