"""
Process-local session store.

Sessions live in a dict and are lost on restart; each server instance has
its own. Entries are never evicted: every new browser that completes the
OAuth callback adds one, so the dict grows until the process restarts.
Use the Postgres backend when running more than one instance or when that
growth matters.
"""

from __future__ import annotations

import asyncio
from typing import Any


class SessionStore:
    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def get(self, session_id: str) -> dict[str, Any] | None:
        async with self._lock:
            data = self._data.get(session_id)
            return dict(data) if data is not None else None

    async def set(self, session_id: str, data: dict[str, Any]) -> None:
        async with self._lock:
            current = self._data.setdefault(session_id, {})
            current.update(data)

    async def clear(self) -> None:
        async with self._lock:
            self._data.clear()
