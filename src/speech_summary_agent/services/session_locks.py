"""
Эксклюзивные блокировки на сессию.

Все изменения одной сессии (чанк, summary, перевод) идут по очереди,
поэтому фрагменты транскрипта не теряются и не перемешиваются.
Блокировка живёт, пока её кто-то держит или ждёт; потом удаляется.
Только внутри процесса: для нескольких инстансов нужен sticky routing.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class SessionLocks:
    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[str, _Entry] = {}

    @contextmanager
    def hold(self, session_id: str) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(session_id)
            if entry is None:
                entry = _Entry()
                self._entries[session_id] = entry
            entry.users += 1

        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    self._entries.pop(session_id, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)
