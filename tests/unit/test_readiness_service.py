from __future__ import annotations

import pytest

from speech_summary_agent.common.config import get_settings
from speech_summary_agent.services.readiness_service import (
    enforce_startup_readiness,
    evaluate_readiness,
)

_KEYS = [
    "app_env",
    "auth_mode",
    "api_keys",
    "cors_allowed_origins",
    "session_store",
    "stt_provider",
    "deepgram_api_key",
    "llm_provider",
    "openai_api_base",
    "openai_api_key",
    "readiness_fail_fast_in_prod",
    "jwt_shared_secret",
    "oidc_issuer_url",
    "oidc_jwks_url",
]


@pytest.fixture()
def rs():
    s = get_settings()
    snapshot = {k: getattr(s, k) for k in _KEYS}
    try:
        yield s
    finally:
        for k, v in snapshot.items():
            setattr(s, k, v)


def _configured(s) -> None:
    s.auth_mode = "api_key"
    s.api_keys = "k1"
    s.stt_provider = "deepgram"
    s.deepgram_api_key = "dg"
    s.llm_provider = "openai_compat"
    s.openai_api_base = "https://llm.local/v1"
    s.openai_api_key = "sk"
    s.session_store = "db"


def test_readiness_prod_fails_on_none_auth_and_wildcard(rs) -> None:
    _configured(rs)
    rs.app_env = "prod"
    rs.auth_mode = "none"
    rs.cors_allowed_origins = "*"

    state = evaluate_readiness()
    codes = {i.code for i in state.issues}
    assert state.ready is False
    assert "auth_none_in_prod" in codes
    assert "cors_wildcard_in_prod" in codes


def test_readiness_missing_provider_credentials(rs) -> None:
    _configured(rs)
    rs.app_env = "dev"
    rs.deepgram_api_key = None
    rs.openai_api_key = ""

    state = evaluate_readiness()
    issues = {i.code: i.severity for i in state.issues}
    assert issues["deepgram_api_key_empty"] == "warning"
    assert issues["llm_not_configured"] == "warning"
    assert state.ready is True

    rs.app_env = "prod"
    rs.cors_allowed_origins = "https://record.example.com"
    state = evaluate_readiness()
    issues = {i.code: i.severity for i in state.issues}
    assert issues["deepgram_api_key_empty"] == "error"
    assert issues["llm_not_configured"] == "error"
    assert state.ready is False


def test_readiness_prod_memory_store_and_mocks_are_warnings(rs) -> None:
    _configured(rs)
    rs.app_env = "prod"
    rs.cors_allowed_origins = "https://record.example.com"
    rs.session_store = "memory"
    rs.stt_provider = "mock"

    state = evaluate_readiness()
    issues = {i.code: i.severity for i in state.issues}
    assert issues["memory_store_in_prod"] == "warning"
    assert issues["mock_provider_in_prod"] == "warning"
    assert state.ready is True


def test_readiness_dev_allows_configured_defaults(rs) -> None:
    _configured(rs)
    rs.app_env = "dev"
    rs.session_store = "memory"
    state = evaluate_readiness()
    assert state.ready is True


def test_startup_readiness_fail_fast_in_prod(rs) -> None:
    _configured(rs)
    rs.app_env = "prod"
    rs.auth_mode = "none"
    rs.cors_allowed_origins = "https://record.example.com"
    rs.readiness_fail_fast_in_prod = True
    with pytest.raises(RuntimeError, match="auth_none_in_prod"):
        enforce_startup_readiness(service_name="api-gateway")


def test_startup_readiness_no_fail_fast_in_prod(rs) -> None:
    _configured(rs)
    rs.app_env = "prod"
    rs.auth_mode = "none"
    rs.readiness_fail_fast_in_prod = False
    state = enforce_startup_readiness(service_name="api-gateway")
    assert state.ready is False
    assert any(i.code == "auth_none_in_prod" for i in state.issues)


def test_readiness_prod_jwt_with_shared_secret_only(rs) -> None:
    _configured(rs)
    rs.app_env = "prod"
    rs.auth_mode = "jwt"
    rs.cors_allowed_origins = "https://record.example.com"
    rs.oidc_issuer_url = None
    rs.oidc_jwks_url = None
    rs.jwt_shared_secret = "shared"

    state = evaluate_readiness()
    issues = {i.code: i.severity for i in state.issues}
    assert "oidc_not_configured" not in issues
    assert issues["jwt_shared_secret_set"] == "warning"
    assert state.ready is True

    rs.jwt_shared_secret = None
    state = evaluate_readiness()
    assert state.ready is False
    assert "oidc_not_configured" in {i.code for i in state.issues}
