import asyncio

import asyncpg
import pytest
from fastapi.testclient import TestClient

import main
from codes import repository as codes_repository
from core import db, settings


def test_health(client):
    res = client.get("/")
    assert res.status_code == 200
    assert res.json() == {"status": "OK", "service": "Referred.space API", "version": "1.0.0"}


def test_cors_preflight_allows_admin_header(client):
    res = client.options(
        "/admin/store-codes",
        headers={
            "Origin": "https://shop.example",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "X-Admin-Key",
        },
    )
    assert res.status_code == 200
    assert res.headers["access-control-allow-credentials"] == "true"
    assert "X-Admin-Key" in res.headers["access-control-allow-headers"]


def test_allowed_origins_parsing(monkeypatch):
    monkeypatch.delenv("ALLOWED_ORIGIN", raising=False)
    assert settings.allowed_origins() == ["*"]

    monkeypatch.setenv("ALLOWED_ORIGIN", " https://a.example , https://b.example,")
    assert settings.allowed_origins() == ["https://a.example", "https://b.example"]


def test_data_routes_without_database_report_configuration_error(monkeypatch):
    # No fake repository here: the real one hits the uninitialized pool.
    monkeypatch.setattr(db, "_pool", None)
    res = TestClient(main.app).post("/api/check-codes", json={"domain": "shop.example"})
    assert res.status_code == 500
    assert res.json() == {"error": "Database not configured"}


def test_database_errors_surface_their_message(client, monkeypatch):
    async def broken(domain):
        raise asyncpg.PostgresError("relation \"stores\" does not exist")

    monkeypatch.setattr(codes_repository, "get_store_by_domain", broken)

    res = client.post("/api/report-code", json={"domain": "shop.example", "code": "X", "success": True})
    assert res.status_code == 500
    assert res.json() == {"error": 'relation "stores" does not exist'}


@pytest.mark.parametrize(
    "exc, message",
    [
        (asyncio.TimeoutError(), "Database request timed out"),
        (
            asyncpg.InterfaceError("cannot perform operation: another operation is in progress"),
            "cannot perform operation: another operation is in progress",
        ),
    ],
)
def test_driver_failures_answer_json_500(client, monkeypatch, exc, message):
    async def broken(domain):
        raise exc

    monkeypatch.setattr(codes_repository, "get_store_by_domain", broken)

    res = client.post("/api/check-codes", json={"domain": "shop.example"})
    assert res.status_code == 500
    assert res.json() == {"error": message}


def test_store_upsert_returning_nothing_answers_json_500(monkeypatch):
    # Real repository functions over a database that returns no rows.
    async def fetch_one(sql, *args):
        return None

    monkeypatch.setenv("ADMIN_KEY", "k")
    monkeypatch.setattr(db, "fetch_one", fetch_one)

    res = TestClient(main.app).post(
        "/admin/store-codes",
        json={"domain": "shop.example", "codes": ["SAVE10"]},
        headers={"X-Admin-Key": "k"},
    )
    assert res.status_code == 500
    assert res.json() == {"error": "Failed to upsert store."}


@pytest.mark.parametrize(
    "url, expected",
    [
        ("postgresql://u:p@h/db", "postgresql://u:p@h/db"),
        ("postgresql://u:p@h/db?sslmode=require&application_name=x", "postgresql://u:p@h/db?application_name=x"),
    ],
)
def test_database_url_drops_sslmode(monkeypatch, url, expected):
    monkeypatch.setenv("DATABASE_URL", url)
    assert db.database_url() == expected
