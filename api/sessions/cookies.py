"""
Session cookie helpers.
"""

from __future__ import annotations

import secrets
from typing import Any

from fastapi import Request, Response

from core import settings

from . import get_store

SESSION_COOKIE = "referred_sid"


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


def session_id_from(request: Request) -> str | None:
    raw = (request.cookies.get(SESSION_COOKIE) or "").strip()
    return raw or None


async def load_session(request: Request) -> dict[str, Any]:
    session_id = session_id_from(request)
    if session_id is None:
        return {}
    return await get_store().get(session_id) or {}


async def save_session(request: Request, response: Response, data: dict[str, Any]) -> str:
    """
    Merge `data` into the caller's session, creating one if needed.

    A cookie id the store does not know is never adopted.
    """
    store = get_store()
    session_id = session_id_from(request)
    if session_id is None or await store.get(session_id) is None:
        session_id = new_session_id()
    await store.set(session_id, data)
    response.set_cookie(
        SESSION_COOKIE,
        session_id,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure(),
    )
    return session_id
