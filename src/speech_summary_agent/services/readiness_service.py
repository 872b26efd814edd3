"""
Проверки готовности к запуску.

Ошибки (error) блокируют старт в prod, предупреждения (warning) только логируются.
Вне prod отсутствие ключей провайдеров считается warning: сервис стартует,
но чанки не транскрибируются, а summary/перевод отвечают ошибкой.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from speech_summary_agent.common.config import Settings, get_settings
from speech_summary_agent.common.logging import get_project_logger
from speech_summary_agent.common.security import is_prod_env

log = get_project_logger()

SESSION_STORES = {"memory", "db", "redis"}


@dataclass
class ReadinessIssue:
    severity: str  # error|warning
    code: str
    message: str


@dataclass
class ReadinessState:
    ready: bool
    issues: list[ReadinessIssue] = field(default_factory=list)


class _Collector:
    def __init__(self) -> None:
        self.issues: list[ReadinessIssue] = []

    def error(self, code: str, message: str) -> None:
        self.issues.append(ReadinessIssue(severity="error", code=code, message=message))

    def warning(self, code: str, message: str) -> None:
        self.issues.append(ReadinessIssue(severity="warning", code=code, message=message))

    def add(self, strict: bool, code: str, message: str) -> None:
        (self.error if strict else self.warning)(code, message)


def _norm(value: str | None) -> str:
    return (value or "").strip().lower()


def _check_auth(s: Settings, out: _Collector, is_prod: bool) -> None:
    mode = _norm(s.auth_mode)
    if mode == "api_key" and not (s.api_keys or "").strip():
        out.error("auth_api_keys_empty", "AUTH_MODE=api_key требует непустой API_KEYS")
    if not is_prod:
        return
    if mode == "none":
        out.error("auth_none_in_prod", "AUTH_MODE=none запрещен в prod")
    if mode == "jwt":
        has_secret = bool((s.jwt_shared_secret or "").strip())
        has_oidc = bool((s.oidc_issuer_url or "").strip() or (s.oidc_jwks_url or "").strip())
        if not has_secret and not has_oidc:
            out.error(
                "oidc_not_configured",
                "AUTH_MODE=jwt требует OIDC_ISSUER_URL, OIDC_JWKS_URL или JWT_SHARED_SECRET",
            )
        if has_secret:
            out.warning("jwt_shared_secret_set", "JWT_SHARED_SECRET задан; в prod лучше OIDC/JWKS")


def _check_providers(s: Settings, out: _Collector, is_prod: bool) -> None:
    stt = _norm(s.stt_provider)
    llm = _norm(s.llm_provider)

    if stt == "deepgram" and not (s.deepgram_api_key or "").strip():
        out.add(is_prod, "deepgram_api_key_empty", "STT_PROVIDER=deepgram требует DEEPGRAM_API_KEY")
    if llm == "openai_compat" and not (
        (s.openai_api_base or "").strip() and (s.openai_api_key or "").strip()
    ):
        out.add(
            is_prod,
            "llm_not_configured",
            "LLM_PROVIDER=openai_compat требует OPENAI_API_BASE и OPENAI_API_KEY",
        )
    if is_prod and "mock" in {stt, llm}:
        out.warning("mock_provider_in_prod", "В prod используется mock STT/LLM провайдер")


def _check_runtime(s: Settings, out: _Collector, is_prod: bool) -> None:
    store = _norm(s.session_store)
    if store not in SESSION_STORES:
        out.error("session_store_unknown", f"Неизвестный SESSION_STORE={store}")
    if not is_prod:
        return
    if store == "memory":
        out.warning("memory_store_in_prod", "SESSION_STORE=memory: сессии теряются при рестарте")
    if "*" in (s.cors_allowed_origins or ""):
        out.error("cors_wildcard_in_prod", "CORS wildcard '*' запрещен в prod")


def evaluate_readiness() -> ReadinessState:
    s = get_settings()
    is_prod = is_prod_env(s.app_env)
    out = _Collector()
    for check in (_check_auth, _check_providers, _check_runtime):
        check(s, out, is_prod)
    return ReadinessState(
        ready=all(i.severity != "error" for i in out.issues),
        issues=out.issues,
    )


def enforce_startup_readiness(*, service_name: str) -> ReadinessState:
    s = get_settings()
    state = evaluate_readiness()
    error_codes = [i.code for i in state.issues if i.severity == "error"]
    warning_codes = [i.code for i in state.issues if i.severity == "warning"]

    if error_codes:
        log.error(
            "startup_readiness_failed",
            extra={
                "payload": {
                    "service": service_name,
                    "app_env": s.app_env,
                    "error_codes": error_codes,
                    "warning_codes": warning_codes,
                }
            },
        )
    else:
        log.info(
            "startup_readiness_ok",
            extra={
                "payload": {
                    "service": service_name,
                    "app_env": s.app_env,
                    "warning_codes": warning_codes,
                }
            },
        )

    if error_codes and is_prod_env(s.app_env) and s.readiness_fail_fast_in_prod:
        raise RuntimeError(
            f"startup readiness failed for {service_name}: {', '.join(error_codes)}"
        )
    return state
