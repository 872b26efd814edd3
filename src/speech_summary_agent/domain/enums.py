"""
Доменные перечисления (enum).
"""

from __future__ import annotations

import enum


class SummaryType(str, enum.Enum):
    """
    Тип (длина/структура) summary.
    """

    short = "short"
    medium = "medium"
    detailed = "detailed"

    @classmethod
    def resolve(cls, value: str | None) -> SummaryType:
        """Неизвестные значения сводим к medium."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.medium
