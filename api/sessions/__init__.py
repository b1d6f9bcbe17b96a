"""
Server-held creator sessions.

The browser only carries an opaque session id cookie; the session data
(`creatorId`, `instagramHandle`) lives in the selected backend:

- SESSION_BACKEND=memory (default): process-local dict
- SESSION_BACKEND=pg: `creator_sessions` table
"""

from __future__ import annotations

from core import settings

from . import _memory, _postgres

# One dict per process; handing out a fresh instance would drop sessions.
_memory_store = _memory.SessionStore()


def get_store() -> _memory.SessionStore | _postgres.SessionStore:
    if settings.session_backend() == "pg":
        return _postgres.SessionStore()
    return _memory_store


__all__ = ["get_store"]
