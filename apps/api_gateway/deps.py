"""
FastAPI Depends.

- авторизация (Bearer JWT / X-API-Key) с audit-логом allow/deny
- сервис сессий (в тестах подменяется через dependency_overrides)
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Header, HTTPException, Request, status

from speech_summary_agent.common.errors import UnauthorizedError
from speech_summary_agent.common.logging import get_project_logger
from speech_summary_agent.common.security import AuthContext, require_auth
from speech_summary_agent.services.session_service import SessionService, get_session_service

log = get_project_logger()


def _audit(event: str, level: int, request: Request, **fields: Any) -> None:
    payload = {
        "endpoint": request.url.path,
        "method": request.method,
        "client_ip": request.client.host if request.client else None,
        **fields,
    }
    log.log(level, event, extra={"payload": payload})


def auth_dep(
    request: Request,
    authorization: str | None = Header(default=None, alias="Authorization"),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> AuthContext:
    """
    Проверка авторизации для HTTP. Отказ -> 401 с {code, message}.
    """
    try:
        ctx = require_auth(authorization=authorization, x_api_key=x_api_key)
    except UnauthorizedError as e:
        _audit(
            "security_audit_deny",
            logging.WARNING,
            request,
            status_code=status.HTTP_401_UNAUTHORIZED,
            reason=e.message,
            error_code=e.code,
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": e.code, "message": e.message},
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    _audit(
        "security_audit_allow",
        logging.INFO,
        request,
        subject=ctx.subject,
        auth_type=ctx.auth_type,
        reason="auth_ok",
    )
    return ctx


def service_dep() -> SessionService:
    return get_session_service()
