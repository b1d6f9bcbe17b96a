from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient

import main
import sessions
from auth import repository as auth_repository
from codes import repository as codes_repository
from oauth import repository as oauth_repository

ADMIN_KEY = "test-admin-key"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class FakeDatabase:
    """
    In-memory stand-in for the repository modules.

    Mirrors the SQL semantics the service layer relies on: unique keys,
    upserts that return existing rows, atomic counter bumps.
    """

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.stores: dict[str, dict[str, Any]] = {}
        self.codes: dict[tuple[int, str], dict[str, Any]] = {}
        self.creators: dict[str, dict[str, Any]] = {}
        self.edges: set[tuple[int, int]] = set()
        self.users: dict[str, dict[str, Any]] = {}
        self.refresh_tokens: dict[str, dict[str, Any]] = {}
        self._ids = 0

    def _next_id(self) -> int:
        self._ids += 1
        return self._ids

    # codes.repository

    async def upsert_store(self, domain: str) -> dict[str, Any]:
        self.calls.append("upsert_store")
        store = self.stores.get(domain)
        if store is None:
            store = {"id": self._next_id(), "domain": domain, "created_at": _now()}
            self.stores[domain] = store
        store["updated_at"] = _now()
        return dict(store)

    async def get_store_by_domain(self, domain: str) -> dict[str, Any] | None:
        self.calls.append("get_store_by_domain")
        store = self.stores.get(domain)
        return dict(store) if store is not None else None

    async def upsert_codes(self, store_id: int, codes: list[str]) -> list[dict[str, Any]]:
        self.calls.append("upsert_codes")
        rows = []
        for code in codes:
            row = self.codes.get((store_id, code))
            if row is None:
                row = {
                    "id": self._next_id(),
                    "store_id": store_id,
                    "code": code,
                    "is_verified": False,
                    "success_count": 0,
                    "fail_count": 0,
                }
                self.codes[(store_id, code)] = row
            rows.append(dict(row))
        return rows

    async def get_code(self, store_id: int, code: str) -> dict[str, Any] | None:
        self.calls.append("get_code")
        row = self.codes.get((store_id, code))
        return dict(row) if row is not None else None

    async def get_creator_by_handle(self, handle: str) -> dict[str, Any] | None:
        self.calls.append("get_creator_by_handle")
        for creator in self.creators.values():
            if creator["instagram_handle"] == handle:
                return {"id": creator["id"], "instagram_handle": handle}
        return None

    async def upsert_creator_code(self, *, creator_id: int, code_id: int) -> None:
        self.calls.append("upsert_creator_code")
        self.edges.add((creator_id, code_id))

    async def list_stores(self) -> list[dict[str, Any]]:
        self.calls.append("list_stores")
        return sorted(
            (dict(s) for s in self.stores.values()),
            key=lambda s: s["updated_at"],
            reverse=True,
        )

    async def list_codes_for_stores(self, store_ids: list[int]) -> list[dict[str, Any]]:
        self.calls.append("list_codes_for_stores")
        return [dict(row) for row in self.codes.values() if row["store_id"] in store_ids]

    async def list_codes_with_creators(self, store_id: int) -> list[dict[str, Any]]:
        self.calls.append("list_codes_with_creators")
        handles_by_id = {c["id"]: c["instagram_handle"] for c in self.creators.values()}
        rows = []
        for row in self.codes.values():
            if row["store_id"] != store_id:
                continue
            linked = sorted(creator_id for (creator_id, code_id) in self.edges if code_id == row["id"])
            rows.append({**row, "creators": [handles_by_id[creator_id] for creator_id in linked]})
        return rows

    async def record_code_report(self, code_id: int, *, success: bool) -> dict[str, Any] | None:
        self.calls.append("record_code_report")
        for row in self.codes.values():
            if row["id"] == code_id:
                if success:
                    row["success_count"] += 1
                else:
                    row["fail_count"] += 1
                row["is_verified"] = row["is_verified"] or success
                return dict(row)
        return None

    # oauth.repository

    async def upsert_creator(self, *, instagram_id: str, instagram_handle: str, access_token: str) -> dict[str, Any]:
        self.calls.append("upsert_creator")
        creator = self.creators.get(instagram_id)
        if creator is None:
            creator = {"id": self._next_id(), "instagram_id": instagram_id, "created_at": _now()}
            self.creators[instagram_id] = creator
        creator.update(instagram_handle=instagram_handle, access_token=access_token, updated_at=_now())
        return dict(creator)

    def add_creator(self, handle: str, instagram_id: str | None = None) -> dict[str, Any]:
        creator = {
            "id": self._next_id(),
            "instagram_id": instagram_id or f"ig-{handle}",
            "instagram_handle": handle,
            "access_token": "token",
            "created_at": _now(),
            "updated_at": _now(),
        }
        self.creators[creator["instagram_id"]] = creator
        return creator

    # auth.repository

    async def create_user(self, *, email: str, password_hash: str) -> dict[str, Any] | None:
        email = auth_repository.normalize_email(email)
        if email in self.users:
            return None
        user = {
            "id": self._next_id(),
            "email": email,
            "password_hash": password_hash,
            "is_active": True,
            "created_at": _now(),
        }
        self.users[email] = user
        return dict(user)

    async def get_user_by_email(self, email: str) -> dict[str, Any] | None:
        user = self.users.get(auth_repository.normalize_email(email))
        return dict(user) if user is not None else None

    async def insert_refresh_token(self, *, user_id: int, token_hash: str, expires_at: datetime) -> None:
        self.refresh_tokens[token_hash] = {"user_id": user_id, "expires_at": expires_at, "revoked": False}

    async def revoke_refresh_token(self, token_hash: str) -> bool:
        token = self.refresh_tokens.get(token_hash)
        if token is None or token["revoked"]:
            return False
        token["revoked"] = True
        return True


@pytest.fixture
def fake_db(monkeypatch: pytest.MonkeyPatch) -> FakeDatabase:
    fake = FakeDatabase()
    for name in (
        "upsert_store",
        "get_store_by_domain",
        "upsert_codes",
        "get_code",
        "get_creator_by_handle",
        "upsert_creator_code",
        "list_stores",
        "list_codes_for_stores",
        "list_codes_with_creators",
        "record_code_report",
    ):
        monkeypatch.setattr(codes_repository, name, getattr(fake, name))
    monkeypatch.setattr(oauth_repository, "upsert_creator", fake.upsert_creator)
    for name in ("create_user", "get_user_by_email", "insert_refresh_token", "revoke_refresh_token"):
        monkeypatch.setattr(auth_repository, name, getattr(fake, name))
    return fake


@pytest.fixture
def client(fake_db: FakeDatabase, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ADMIN_KEY", ADMIN_KEY)
    monkeypatch.setenv("SESSION_BACKEND", "memory")
    monkeypatch.setenv("IG_CLIENT_ID", "ig-client")
    monkeypatch.setenv("IG_CLIENT_SECRET", "ig-secret")
    monkeypatch.setenv("REDIRECT_URI", "http://testserver/oauth/callback")
    # No `with` block: the lifespan (DB pool) is not started.
    yield TestClient(main.app)
    sessions.get_store()._data.clear()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-Admin-Key": ADMIN_KEY}
