"""
Account persistence helpers.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from core import db


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def create_user(*, email: str, password_hash: str) -> dict[str, Any] | None:
    """
    Insert a user; returns None when the email is already taken.
    """
    return await db.fetch_one(
        """
        INSERT INTO users (email, password_hash)
        VALUES ($1, $2)
        ON CONFLICT DO NOTHING
        RETURNING id, email, is_active, created_at
        """,
        normalize_email(email),
        password_hash,
    )


async def get_user_by_email(email: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        SELECT id, email, password_hash, is_active, created_at
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def insert_refresh_token(*, user_id: int, token_hash: str, expires_at: datetime) -> None:
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)

    await db.execute(
        """
        INSERT INTO refresh_tokens (user_id, token_hash, expires_at)
        VALUES ($1, $2, $3)
        """,
        user_id,
        token_hash,
        expires_at,
    )


async def revoke_refresh_token(token_hash: str) -> bool:
    row = await db.fetch_one(
        """
        UPDATE refresh_tokens
        SET revoked_at = now()
        WHERE token_hash = $1
          AND revoked_at IS NULL
        RETURNING id
        """,
        token_hash,
    )
    return row is not None
