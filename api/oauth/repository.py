"""
Creator persistence for the OAuth flow.
"""

from __future__ import annotations

from typing import Any

from core import db
from core.errors import DatabaseError


async def upsert_creator(*, instagram_id: str, instagram_handle: str, access_token: str) -> dict[str, Any]:
    row = await db.fetch_one(
        """
        INSERT INTO creators (instagram_id, instagram_handle, access_token, updated_at)
        VALUES ($1, $2, $3, now())
        ON CONFLICT (instagram_id) DO UPDATE
        SET instagram_handle = EXCLUDED.instagram_handle,
            access_token = EXCLUDED.access_token,
            updated_at = now()
        RETURNING id, instagram_id, instagram_handle, created_at, updated_at
        """,
        instagram_id,
        instagram_handle,
        access_token,
    )
    if row is None:
        raise DatabaseError("Failed to upsert creator.")
    return row
