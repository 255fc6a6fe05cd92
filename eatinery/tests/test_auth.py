from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from eatinery.app import app
from eatinery.auth.users import authenticate, register
from eatinery.storage import MemStorage, seed_storage, set_storage

client = TestClient(app)


def _register(c, username="mei", password="kimchi123"):
    return c.post("/api/register", json={"username": username, "password": password})


# ── Register ─────────────────────────────────────────────────────────────


def test_register_logs_the_user_in():
    c = TestClient(app)
    resp = _register(c)
    assert resp.status_code == 201
    assert resp.json() == {"id": 1, "username": "mei"}
    assert c.get("/api/user").json()["username"] == "mei"


def test_register_duplicate_username():
    _register(client)
    resp = _register(client, password="different")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Username already exists"


def test_register_rejects_empty_username():
    resp = client.post("/api/register", json={"username": "", "password": "x"})
    assert resp.status_code == 400


def test_password_is_stored_hashed(app_storage):
    _register(client)
    stored = app_storage.get_user_by_username("mei")
    assert stored.password != "kimchi123"
    assert stored.password.startswith("$2")


def test_password_is_never_returned():
    c = TestClient(app)
    body = _register(c).json()
    assert "password" not in body
    assert "password" not in c.get("/api/user").json()


# ── Login / Logout ───────────────────────────────────────────────────────


def test_login_success():
    _register(TestClient(app))
    c = TestClient(app)
    resp = c.post("/api/login", json={"username": "mei", "password": "kimchi123"})
    assert resp.status_code == 200
    assert resp.json()["username"] == "mei"
    assert c.get("/api/user").status_code == 200


def test_login_wrong_password():
    _register(TestClient(app))
    resp = client.post("/api/login", json={"username": "mei", "password": "wrong"})
    assert resp.status_code == 401


def test_login_unknown_user():
    resp = client.post("/api/login", json={"username": "nobody", "password": "x"})
    assert resp.status_code == 401


def test_user_when_not_logged_in():
    c = TestClient(app)  # fresh client, no session
    resp = c.get("/api/user")
    assert resp.status_code == 401


def test_logout():
    c = TestClient(app)
    _register(c)
    resp = c.post("/api/logout")
    assert resp.status_code == 200
    assert resp.json()["status"] == "logged_out"
    # Session should be cleared
    assert c.get("/api/user").status_code == 401


# ── Route protection ─────────────────────────────────────────────────────


def test_create_menu_item_requires_login():
    c = TestClient(app)
    resp = c.post("/api/restaurants/1/menu", json={"name": "Japchae", "calories": 390})
    assert resp.status_code == 401


def test_create_directions_requires_login():
    c = TestClient(app)
    resp = c.post("/api/restaurants/1/directions", json={
        "steps": [{"stepNumber": 1, "instruction": "Walk", "distanceMeters": 60, "timeMinutes": 1}],
        "totalDistanceMeters": 60,
        "totalTimeMinutes": 1,
        "caloriesBurned": 4,
    })
    assert resp.status_code == 401


def test_browsing_is_public():
    c = TestClient(app)
    assert c.get("/api/restaurants").status_code == 200
    assert c.post("/api/restaurants/filter", json={"limit": 1500}).status_code == 200


# ── Helpers against both stores ──────────────────────────────────────────


def test_register_and_authenticate(empty_store):
    user = register(empty_store, "jun", "tteokbokki")
    assert authenticate(empty_store, "jun", "tteokbokki") == user
    assert authenticate(empty_store, "jun", "wrong") is None
    assert authenticate(empty_store, "nobody", "tteokbokki") is None


def test_session_for_forgotten_user_is_rejected():
    c = TestClient(app)
    _register(c)
    fresh = MemStorage()
    seed_storage(fresh)
    set_storage(fresh)  # simulates a restart of the in-memory store
    assert c.get("/api/user").status_code == 401
    assert c.post("/api/restaurants/1/menu", json={"name": "Japchae", "calories": 390}).status_code == 401


# ── Password length ──────────────────────────────────────────────────────


def test_register_rejects_password_over_72_bytes():
    resp = client.post("/api/register", json={"username": "longpw", "password": "x" * 80})
    assert resp.status_code == 400
    assert [e["loc"] for e in resp.json()["errors"]] == [["body", "password"]]


def test_password_limit_counts_bytes_not_characters():
    # 25 three-byte characters is 75 bytes
    resp = client.post("/api/register", json={"username": "hangul", "password": "한" * 25})
    assert resp.status_code == 400


def test_register_accepts_72_byte_password():
    c = TestClient(app)
    resp = c.post("/api/register", json={"username": "edge", "password": "x" * 72})
    assert resp.status_code == 201
    assert c.post("/api/login", json={"username": "edge", "password": "x" * 72}).status_code == 200


def test_login_with_overlong_password_is_rejected():
    _register(client)
    resp = client.post("/api/login", json={"username": "mei", "password": "x" * 80})
    assert resp.status_code == 400


def test_helpers_refuse_overlong_password(empty_store):
    with pytest.raises(ValueError):
        register(empty_store, "jun", "x" * 73)
    assert empty_store.get_user_by_username("jun") is None
    register(empty_store, "jun", "tteokbokki")
    assert authenticate(empty_store, "jun", "x" * 73) is None
