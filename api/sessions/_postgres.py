"""
Postgres-backed session store (`creator_sessions` table).

Shared by every server instance and kept across restarts.
"""

from __future__ import annotations

from typing import Any

from core import db


class SessionStore:
    async def get(self, session_id: str) -> dict[str, Any] | None:
        row = await db.fetch_one(
            """
            SELECT creator_id, instagram_handle
            FROM creator_sessions
            WHERE id = $1
            """,
            session_id,
        )
        if row is None:
            return None
        return {"creatorId": row["creator_id"], "instagramHandle": row["instagram_handle"]}

    async def set(self, session_id: str, data: dict[str, Any]) -> None:
        await db.execute(
            """
            INSERT INTO creator_sessions (id, creator_id, instagram_handle)
            VALUES ($1, $2, $3)
            ON CONFLICT (id) DO UPDATE
            SET creator_id = EXCLUDED.creator_id,
                instagram_handle = EXCLUDED.instagram_handle,
                updated_at = now()
            """,
            session_id,
            data.get("creatorId"),
            data.get("instagramHandle"),
        )
