"""
Генерация идентификаторов.
"""

from __future__ import annotations

import uuid


def new_session_id() -> str:
    """UUIDv4 строкой (идентификатор сессии записи)."""
    return str(uuid.uuid4())

