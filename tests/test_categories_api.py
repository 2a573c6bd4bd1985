import pytest

from categories import repository as categories_repository


@pytest.fixture
def seen_langue(monkeypatch):
    seen = {}

    async def _list(*, langue):
        seen["langue"] = langue
        return [{"id": 1, "name": "Hôtels", "langue": langue}]

    monkeypatch.setattr(categories_repository, "list_categories", _list)
    return seen


def test_list_categories_defaults_to_french(client, seen_langue):
    r = client.get("/categories")

    assert r.status_code == 200
    assert r.json() == [{"id": 1, "name": "Hôtels", "langue": "fr"}]
    assert seen_langue["langue"] == "fr"


def test_list_categories_for_other_language(client, seen_langue):
    r = client.get("/categories", params={"langue": "en"})

    assert r.status_code == 200
    assert seen_langue["langue"] == "en"


def test_list_categories_database_error_returns_500(monkeypatch):
    from fastapi.testclient import TestClient

    from main import app

    async def _boom(*, langue):
        raise RuntimeError("connection refused")

    monkeypatch.setattr(categories_repository, "list_categories", _boom)

    r = TestClient(app, raise_server_exceptions=False).get("/categories")

    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}


@pytest.mark.asyncio
async def test_repository_filters_by_language(fake_pool):
    fake_pool.fetch_result = [{"id": 3, "name": "Restaurants", "langue": "fr"}]

    rows = await categories_repository.list_categories(langue="fr")

    assert rows == [{"id": 3, "name": "Restaurants", "langue": "fr"}]
    _, statement, args = fake_pool.conn.statements[0]
    assert "WHERE langue = $1" in statement
    assert args == ("fr",)


def test_database_error_response_keeps_cors_and_security_headers(monkeypatch):
    from fastapi.testclient import TestClient

    from main import app

    async def _boom(*, langue):
        raise RuntimeError("connection refused")

    monkeypatch.setattr(categories_repository, "list_categories", _boom)

    r = TestClient(app).get("/categories", headers={"Origin": "http://localhost:5173"})

    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}
    assert "access-control-allow-origin" in r.headers
    assert r.headers["X-Content-Type-Options"] == "nosniff"
