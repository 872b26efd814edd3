"""
Авторизация HTTP-вызовов.

Режимы (AUTH_MODE):
- api_key: X-API-Key из API_KEYS (пользователь) или SERVICE_API_KEYS (сервис)
- jwt    : Bearer JWT (shared secret или OIDC/JWKS), service key как запасной путь
- none   : без проверки, только вне prod

AuthContext.subject становится владельцем сессии записи (user_id).
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import jwt
import requests

from .config import Settings, get_settings
from .errors import UnauthorizedError

ANONYMOUS_SUBJECT = "anonymous"
SERVICE_SUBJECT = "service"


@dataclass(frozen=True)
class AuthContext:
    subject: str
    auth_type: str  # none|user_api_key|service_api_key|jwt
    claims: dict[str, Any] | None = None


def is_prod_env(app_env: str | None) -> bool:
    return (app_env or "").strip().lower() in {"prod", "production"}


def _csv(raw: str | None) -> list[str]:
    return [part.strip() for part in (raw or "").split(",") if part.strip()]


@dataclass(frozen=True)
class KeyRing:
    user_keys: frozenset[str]
    service_keys: frozenset[str]

    @classmethod
    def from_settings(cls, s: Settings) -> KeyRing:
        return cls(
            user_keys=frozenset(_csv(s.api_keys)),
            service_keys=frozenset(_csv(s.service_api_keys)),
        )

    def is_service(self, key: str | None) -> bool:
        return bool(key) and key in self.service_keys

    def is_known(self, key: str | None) -> bool:
        return bool(key) and (key in self.user_keys or key in self.service_keys)


def _user_key_subject(key: str) -> str:
    # сам ключ в subject не попадает: subject пишется в логи и в user_id сессии
    return "api_key:" + hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]


def _bearer_token(authorization: str | None) -> str | None:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


# =============================================================================
# JWT
# =============================================================================
@lru_cache(maxsize=8)
def _jwks_client(jwks_url: str) -> jwt.PyJWKClient:
    return jwt.PyJWKClient(jwks_url)


@lru_cache(maxsize=8)
def _jwks_url_from_discovery(issuer_url: str, timeout_s: int) -> str:
    url = issuer_url.rstrip("/") + "/.well-known/openid-configuration"
    try:
        resp = requests.get(url, timeout=timeout_s)
        resp.raise_for_status()
        jwks_uri = resp.json().get("jwks_uri")
    except (requests.RequestException, ValueError) as e:
        raise UnauthorizedError("OIDC discovery недоступен", {"err": str(e)}) from e
    if not jwks_uri:
        raise UnauthorizedError("В OIDC discovery нет jwks_uri")
    return str(jwks_uri)


def _decode_jwt(token: str, s: Settings) -> dict[str, Any]:
    audience = (s.oidc_audience or "").strip() or None
    issuer = (s.oidc_issuer_url or "").strip() or None
    options: dict[str, Any] = {
        "algorithms": _csv(s.oidc_algorithms) or ["RS256"],
        "options": {"verify_aud": audience is not None},
        "leeway": int(s.jwt_clock_skew_sec or 30),
    }
    if audience:
        options["audience"] = audience
    if issuer:
        options["issuer"] = issuer

    try:
        secret = (s.jwt_shared_secret or "").strip()
        if secret:
            return jwt.decode(token, secret, **options)

        jwks_url = (s.oidc_jwks_url or "").strip()
        if not jwks_url:
            if not issuer:
                raise UnauthorizedError("JWT не настроен: нужен OIDC_JWKS_URL или OIDC_ISSUER_URL")
            jwks_url = _jwks_url_from_discovery(issuer, int(s.oidc_discovery_timeout_sec or 5))
        signing_key = _jwks_client(jwks_url).get_signing_key_from_jwt(token).key
        return jwt.decode(token, key=signing_key, **options)
    except jwt.PyJWTError as e:
        raise UnauthorizedError("JWT не прошёл проверку", {"err": str(e)}) from e


# =============================================================================
# РЕЖИМЫ
# =============================================================================
def _auth_none(s: Settings, authorization: str | None, x_api_key: str | None) -> AuthContext:
    if is_prod_env(s.app_env):
        raise UnauthorizedError("AUTH_MODE=none запрещён в APP_ENV=prod")
    return AuthContext(subject=ANONYMOUS_SUBJECT, auth_type="none")


def _auth_api_key(s: Settings, authorization: str | None, x_api_key: str | None) -> AuthContext:
    keys = KeyRing.from_settings(s)
    if not keys.is_known(x_api_key):
        raise UnauthorizedError("Неверный API ключ")
    if keys.is_service(x_api_key):
        return AuthContext(subject=SERVICE_SUBJECT, auth_type="service_api_key")
    return AuthContext(subject=_user_key_subject(x_api_key or ""), auth_type="user_api_key")


def _auth_jwt(s: Settings, authorization: str | None, x_api_key: str | None) -> AuthContext:
    token = _bearer_token(authorization)
    if token:
        claims = _decode_jwt(token, s)
        subject = str(claims.get("sub") or claims.get("client_id") or "jwt_subject")
        return AuthContext(subject=subject, auth_type="jwt", claims=claims)

    if s.allow_service_api_key_in_jwt_mode and KeyRing.from_settings(s).is_service(x_api_key):
        return AuthContext(subject=SERVICE_SUBJECT, auth_type="service_api_key")
    raise UnauthorizedError("Нужен Bearer JWT или service API key")


_MODES = {
    "none": _auth_none,
    "api_key": _auth_api_key,
    "jwt": _auth_jwt,
}


def require_auth(*, authorization: str | None, x_api_key: str | None) -> AuthContext:
    """
    Проверка заголовков Authorization / X-API-Key по текущему AUTH_MODE.
    Любой отказ -> UnauthorizedError.
    """
    s = get_settings()
    mode = (s.auth_mode or "api_key").strip().lower()
    handler = _MODES.get(mode)
    if handler is None:
        raise UnauthorizedError(f"Неизвестный AUTH_MODE={mode}")
    return handler(s, authorization, x_api_key)
