"""
Code registry persistence.
This module is where store / discount code / creator link SQL lives.
"""

from __future__ import annotations

from typing import Any

from core import db
from core.errors import DatabaseError


async def upsert_store(domain: str) -> dict[str, Any]:
    """
    Create the store for `domain`, or touch `updated_at` if it already exists.
    """
    row = await db.fetch_one(
        """
        INSERT INTO stores (domain)
        VALUES ($1)
        ON CONFLICT (domain) DO UPDATE
        SET updated_at = now()
        RETURNING id, domain, created_at, updated_at
        """,
        domain,
    )
    if row is None:
        raise DatabaseError("Failed to upsert store.")
    return row


async def get_store_by_domain(domain: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        SELECT id, domain, created_at, updated_at
        FROM stores
        WHERE domain = $1
        """,
        domain,
    )


async def upsert_codes(store_id: int, codes: list[str]) -> list[dict[str, Any]]:
    """
    Insert codes for a store; existing rows are returned unchanged.

    The no-op `DO UPDATE` makes `RETURNING` include rows that already existed,
    so the caller gets an id for every submitted code. `codes` must not
    contain duplicates (Postgres refuses to touch one row twice per statement).
    """
    if not codes:
        return []
    return await db.fetch_all(
        """
        INSERT INTO discount_codes (store_id, code)
        SELECT $1, c
        FROM unnest($2::text[]) AS c
        ON CONFLICT (store_id, code) DO UPDATE
        SET updated_at = discount_codes.updated_at
        RETURNING id, code, is_verified, success_count, fail_count
        """,
        store_id,
        codes,
    )


async def get_code(store_id: int, code: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        SELECT id, code, is_verified, success_count, fail_count
        FROM discount_codes
        WHERE store_id = $1
          AND code = $2
        """,
        store_id,
        code,
    )


async def get_creator_by_handle(handle: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        SELECT id, instagram_handle
        FROM creators
        WHERE instagram_handle = $1
        ORDER BY updated_at DESC
        LIMIT 1
        """,
        handle,
    )


async def upsert_creator_code(*, creator_id: int, code_id: int) -> None:
    await db.execute(
        """
        INSERT INTO creator_codes (creator_id, code_id)
        VALUES ($1, $2)
        ON CONFLICT (creator_id, code_id) DO NOTHING
        """,
        creator_id,
        code_id,
    )


async def list_stores() -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT id, domain, created_at, updated_at
        FROM stores
        ORDER BY updated_at DESC, id DESC
        """
    )


async def list_codes_for_stores(store_ids: list[int]) -> list[dict[str, Any]]:
    if not store_ids:
        return []
    return await db.fetch_all(
        """
        SELECT store_id, code, is_verified, success_count
        FROM discount_codes
        WHERE store_id = ANY($1::bigint[])
        ORDER BY store_id, id
        """,
        store_ids,
    )


async def list_codes_with_creators(store_id: int) -> list[dict[str, Any]]:
    """
    Codes of one store, each with the handles linked to it (possibly empty).
    """
    return await db.fetch_all(
        """
        SELECT
          dc.id,
          dc.code,
          dc.is_verified,
          dc.success_count,
          COALESCE(
            array_agg(cr.instagram_handle ORDER BY cc.id) FILTER (WHERE cr.id IS NOT NULL),
            ARRAY[]::text[]
          ) AS creators
        FROM discount_codes dc
        LEFT JOIN creator_codes cc ON cc.code_id = dc.id
        LEFT JOIN creators cr ON cr.id = cc.creator_id
        WHERE dc.store_id = $1
        GROUP BY dc.id
        ORDER BY dc.id
        """,
        store_id,
    )


async def record_code_report(code_id: int, *, success: bool) -> dict[str, Any] | None:
    """
    Bump the success or fail counter in one statement.

    Verification only ever moves from false to true.
    """
    return await db.fetch_one(
        """
        UPDATE discount_codes
        SET success_count = success_count + CASE WHEN $2 THEN 1 ELSE 0 END,
            fail_count = fail_count + CASE WHEN $2 THEN 0 ELSE 1 END,
            is_verified = is_verified OR $2,
            updated_at = now()
        WHERE id = $1
        RETURNING id, code, is_verified, success_count, fail_count
        """,
        code_id,
        success,
    )
