"""HTTP surface tests: FastAPI app over an in-memory SQLite database."""

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient

import score_import.database as db_module
from score_import.auth import verify_token
from score_import.config import settings
from score_import.dependencies import configure_collaborators, get_import_service
from score_import.imports.repository import ImportRepository
from score_import.imports.service import ImportService
from score_import.main import app
from tests.fakes import FakeGameStatsUpdater, make_collaborators


def _document(*playtypes):
    return {
        "meta": {"game": "iidx", "playtype": "SP", "service": "api-test"},
        "scores": [
            {
                "identifier": f"song-{i}",
                "difficulty": "ANOTHER",
                "score": 1000 + i,
                "lamp": "CLEAR",
                "playtype": playtype,
            }
            for i, playtype in enumerate(playtypes)
        ]
        + [{"identifier": "broken", "difficulty": "ANOTHER", "score": -5, "lamp": "CLEAR"}],
    }


def _service_factory(db, collaborators):
    def factory():
        return ImportService(
            collaborators,
            ImportRepository(db),
            high_log_threshold=settings.import_log_high_threshold,
            medium_log_threshold=settings.import_log_medium_threshold,
        )

    return factory


@pytest.fixture
async def client(db, collaborators, monkeypatch):
    monkeypatch.setattr(db_module, "_db", db)

    app.dependency_overrides[get_import_service] = _service_factory(db, collaborators)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
async def auth_headers(client):
    response = await client.post(
        "/api/v1/auth/login",
        json={"username": settings.auth_username, "password": settings.auth_password},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


async def test_health(client):
    response = await client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


async def test_login_rejects_bad_password(client):
    response = await client.post(
        "/api/v1/auth/login", json={"username": settings.auth_username, "password": "wrong"}
    )

    assert response.status_code == 401
    assert response.json()["error"] == "UNAUTHORIZED"


async def test_imports_require_a_token(client):
    response = await client.get("/api/v1/imports/")

    assert response.status_code in (401, 403)


async def test_batch_manual_import_round_trip(client, auth_headers):
    response = await client.post(
        "/api/v1/imports/batch-manual", json=_document("SP", "SP", "DP"), headers=auth_headers
    )

    assert response.status_code == 201
    body = response.json()
    assert len(body["scoreIDs"]) == 3
    assert len(body["errors"]) == 1
    assert body["errors"][0]["type"] == "InvalidScore"
    assert body["idStrings"] == ["iidx:SP", "iidx:DP"]
    assert body["userID"] == settings.auth_user_id
    assert body["userIntent"] is True
    assert body["importType"] == "file/batch-manual"

    fetched = await client.get(f"/api/v1/imports/{body['importID']}", headers=auth_headers)
    assert fetched.status_code == 200
    assert fetched.json() == body

    listed = await client.get(
        "/api/v1/imports/", params={"user_id": settings.auth_user_id}, headers=auth_headers
    )
    assert [item["importID"] for item in listed.json()] == [body["importID"]]

    for _ in range(20):
        timings = await client.get(
            f"/api/v1/imports/{body['importID']}/timings", headers=auth_headers
        )
        if timings.status_code == 200:
            break
        await asyncio.sleep(0.01)
    assert timings.status_code == 200
    assert timings.json()["importID"] == body["importID"]


async def test_unknown_import_is_404(client, auth_headers):
    response = await client.get("/api/v1/imports/missing", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["error"] == "NOT_FOUND"


async def test_malformed_document_is_422_and_nothing_is_saved(client, auth_headers):
    response = await client.post(
        "/api/v1/imports/batch-manual", json={"scores": []}, headers=auth_headers
    )

    assert response.status_code == 422
    assert response.json()["stage"] == "parse"

    listed = await client.get("/api/v1/imports/", headers=auth_headers)
    assert listed.json() == []


async def test_stage_failure_is_500_and_nothing_is_saved(client, auth_headers, db):
    failing = make_collaborators(game_stats=FakeGameStatsUpdater(failing={"DP"}))
    app.dependency_overrides[get_import_service] = _service_factory(db, failing)

    response = await client.post(
        "/api/v1/imports/batch-manual", json=_document("SP", "DP"), headers=auth_headers
    )

    assert response.status_code == 500
    assert response.json()["stage"] == "ugs"
    assert "'DP'" in response.json()["message"]

    listed = await client.get("/api/v1/imports/", headers=auth_headers)
    assert listed.json() == []


async def test_import_without_collaborators_is_refused(db, monkeypatch):
    monkeypatch.setattr(db_module, "_db", db)
    configure_collaborators(None)
    payload = {"sub": settings.auth_username, "uid": settings.auth_user_id}

    app.dependency_overrides[verify_token] = lambda: payload
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            response = await c.post("/api/v1/imports/batch-manual", json=_document("SP"))
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json()["error"] == "COLLABORATORS_NOT_CONFIGURED"
