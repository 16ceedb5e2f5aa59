"""
API integration tests.
Uses TestClient to avoid starting a server.
Requires: pip install httpx (for TestClient)
"""
from __future__ import annotations

import sqlite3
from pathlib import Path
from unittest.mock import patch

import pytest

try:
    from fastapi.testclient import TestClient
    HAS_HTTPX = True
except (ImportError, RuntimeError):
    HAS_HTTPX = False

# Ensure project root on path
import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

pytestmark = pytest.mark.skipif(not HAS_HTTPX, reason="httpx required for TestClient")

from roundrobin.api import app
from roundrobin.auth import create_access_token, decode_token
from roundrobin.persistence.db import set_db_path, init_db
from roundrobin.persistence.repositories import TournamentRepository


@pytest.fixture(autouse=True)
def isolated_db(tmp_path):
    """Use a temporary DB for each test."""
    db_path = tmp_path / "test.db"
    set_db_path(db_path)
    init_db(db_path=db_path)
    yield db_path


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def auth_headers(client):
    resp = client.post("/signup", json={"username": "organiser", "password": "secret-pw"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}


def _create(client, headers, title="Chess Club", players="Ann;Bob;Cid;Dee", point_system="chess"):
    return client.post(
        "/tournaments",
        json={"title": title, "players": players, "point_system": point_system},
        headers=headers,
    )


def test_signup_and_login(client):
    resp = client.post("/signup", json={"username": "alice", "password": "hunter22"})
    assert resp.status_code == 200
    user_id = resp.json()["user_id"]
    resp = client.post("/login", json={"username": "alice", "password": "hunter22"})
    assert resp.status_code == 200
    assert resp.json()["user_id"] == user_id
    assert resp.json()["token"]


def test_signup_duplicate_username(client):
    client.post("/signup", json={"username": "alice", "password": "hunter22"})
    resp = client.post("/signup", json={"username": "alice", "password": "other-pw"})
    assert resp.status_code == 400


def test_login_wrong_password(client):
    client.post("/signup", json={"username": "alice", "password": "hunter22"})
    resp = client.post("/login", json={"username": "alice", "password": "wrong-pw"})
    assert resp.status_code == 401


def test_login_checks_whole_long_password(client):
    client.post("/signup", json={"username": "longpw", "password": "a" * 72 + "REAL"})
    resp = client.post("/login", json={"username": "longpw", "password": "a" * 72 + "WRONG"})
    assert resp.status_code == 401
    resp = client.post("/login", json={"username": "longpw", "password": "a" * 72 + "REAL"})
    assert resp.status_code == 200


def test_access_token_round_trip():
    token = create_access_token("user-42")
    assert decode_token(token) == "user-42"
    assert decode_token(token + "x") is None


def test_point_systems(client):
    resp = client.get("/point-systems")
    assert resp.status_code == 200
    systems = {s["id"]: s for s in resp.json()["point_systems"]}
    assert set(systems) == {"football", "chess", "basketball"}
    assert (systems["football"]["win"], systems["football"]["draw"], systems["football"]["loss"]) == (3, 1, 0)
    assert systems["chess"]["draw"] == 0.5


def test_create_tournament(client, auth_headers):
    resp = _create(client, auth_headers, players="Ann;Bob;Cid;Dee;Eve")
    assert resp.status_code == 200
    data = resp.json()
    assert data["slug"] == "chess-club"
    assert data["url"] == "/tournaments/chess-club"
    assert data["point_system"] == "chess"
    assert [p["name"] for p in data["players"]] == ["Ann", "Bob", "Cid", "Dee", "Eve"]
    assert all(p["points"] == 0 for p in data["players"])
    assert len(data["rounds"]) == 5
    first = data["rounds"][0]
    assert first["id"] == 1
    assert [p["id"] for p in first["pairs"]] == [0, 1, 2]
    assert sum(1 for p in first["pairs"] if p["player2"] is None) == 1


def test_create_requires_login(client):
    resp = _create(client, headers={})
    assert resp.status_code == 401


def test_create_with_invalid_token(client):
    resp = _create(client, headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


def test_create_validation_errors(client, auth_headers):
    resp = _create(client, auth_headers, title="ab", players="Ann;Bob", point_system="golf")
    assert resp.status_code == 400
    errors = resp.json()["detail"]["errors"]
    assert errors["title"] == "Tournament title must be at least 3 characters long"
    assert errors["players"] == "Tournament must have at least 4 players and at most 8 players"
    assert errors["point_system"] == "You must select a point system"


def test_create_duplicate_title(client, auth_headers):
    assert _create(client, auth_headers).status_code == 200
    resp = _create(client, auth_headers, title="Chess   Club")
    assert resp.status_code == 409
    assert resp.json()["detail"]["errors"]["title"] == "Choose a different title"


def test_create_persistence_failure(client, auth_headers):
    with patch.object(TournamentRepository, "save_schedule", side_effect=sqlite3.OperationalError("locked")):
        resp = _create(client, auth_headers)
    assert resp.status_code == 503
    assert client.get("/tournaments/chess-club").status_code == 404


def test_slug_check(client, auth_headers):
    resp = client.get("/slug", params={"title": "Chess Club!"})
    assert resp.json() == {"slug": "chess-club", "url": "/tournaments/chess-club", "available": True}
    _create(client, auth_headers)
    resp = client.get("/slug", params={"title": "Chess Club!"})
    assert resp.json()["available"] is False


def test_get_tournament(client, auth_headers):
    created = _create(client, auth_headers, players="A;B;C;D;E;F").json()
    resp = client.get("/tournaments/chess-club")
    assert resp.status_code == 200
    data = resp.json()
    assert data["rounds"] == created["rounds"]
    assert len(data["rounds"]) == 5
    assert all(len(r["pairs"]) == 3 for r in data["rounds"])


def test_get_tournament_not_found(client):
    assert client.get("/tournaments/nope").status_code == 404


def test_get_round(client, auth_headers):
    created = _create(client, auth_headers).json()
    resp = client.get("/tournaments/chess-club/rounds/3")
    assert resp.status_code == 200
    data = resp.json()
    assert data["tournament_slug"] == "chess-club"
    assert data["pairs"] == created["rounds"][2]["pairs"]
    assert client.get("/tournaments/chess-club/rounds/4").status_code == 404
    assert client.get("/tournaments/nope/rounds/1").status_code == 404


def test_get_round_does_not_load_whole_tournament(client, auth_headers):
    created = _create(client, auth_headers).json()
    with patch.object(TournamentRepository, "get", side_effect=AssertionError("full load")), \
            patch.object(TournamentRepository, "get_rounds", side_effect=AssertionError("all rounds")):
        resp = client.get("/tournaments/chess-club/rounds/2")
    assert resp.status_code == 200
    assert resp.json()["pairs"] == created["rounds"][1]["pairs"]


def test_list_tournaments(client, auth_headers):
    _create(client, auth_headers, title="First Cup")
    _create(client, auth_headers, title="Second Cup")
    user_id = client.post("/login", json={"username": "organiser", "password": "secret-pw"}).json()["user_id"]
    resp = client.get("/tournaments", params={"user_id": user_id})
    assert resp.status_code == 200
    items = resp.json()["tournaments"]
    assert {t["slug"] for t in items} == {"first-cup", "second-cup"}
    assert all("rounds" not in t for t in items)
    assert client.get("/tournaments", params={"user_id": "someone-else"}).json()["tournaments"] == []
