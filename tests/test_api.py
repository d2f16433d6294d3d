from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from rentauth.app import create_app
from rentauth.repositories.token_store import TokenStoreError


@pytest.fixture()
def client(service):
    with TestClient(create_app(service)) as c:
        yield c


def _register_and_login(client, phone="13800000000", password="secret"):
    res = client.post("/auth/register", json={"phone": phone, "password": password})
    assert res.status_code == 201
    res = client.post("/auth/login", json={"phone": phone, "password": password})
    assert res.status_code == 200
    return res.json()


def test_register_returns_account_with_authorities(client):
    res = client.post("/auth/register", json={"phone": "13800000000", "password": "secret", "role": "TENANT"})

    assert res.status_code == 201
    body = res.json()
    assert body["nick_name"] == "zfyh13800000000"
    assert body["authorities"] == ["ROLE_TENANT"]
    assert "password_hash" not in body


def test_duplicate_registration_is_conflict(client):
    client.post("/auth/register", json={"phone": "13800000000", "password": "secret"})

    res = client.post("/auth/register", json={"phone": "13800000000", "password": "secret"})

    assert res.status_code == 409
    assert res.json()["code"] == "duplicate_phone"


def test_admin_role_cannot_be_self_assigned(client):
    res = client.post("/auth/register", json={"phone": "13800000000", "password": "secret", "role": "ADMIN"})

    assert res.status_code == 400
    assert res.json()["code"] == "validation_failed"


def test_malformed_body_is_validation_failed(client):
    res = client.post("/auth/register", json={"phone": "13800000000", "password": "123"})

    assert res.status_code == 400
    assert res.json()["code"] == "validation_failed"
    assert "password" in res.json()["message"]


def test_login_rejects_bad_password(client):
    client.post("/auth/register", json={"phone": "13800000000", "password": "secret"})

    res = client.post("/auth/login", json={"phone": "13800000000", "password": "wrong!"})

    assert res.status_code == 401
    assert res.json()["code"] == "invalid_credentials"


def test_me_requires_session(client):
    assert client.get("/users/me").status_code == 401


def test_profile_avatar_and_password_flow(client):
    login = _register_and_login(client)
    headers = {"Authorization": f"Bearer {login['session_token']}"}

    res = client.put("/users/me", json={"nick_name": "harry", "introduction": "hello"}, headers=headers)
    assert res.status_code == 200
    assert res.json()["nick_name"] == "harry"

    assert client.put("/users/me/avatar", json={"avatar": "me.png"}, headers=headers).status_code == 204
    assert client.get("/users/me", headers=headers).json()["avatar"] == "me.png"

    res = client.put("/users/me/password", json={"old_password": "", "new_password": "changed"}, headers=headers)
    assert res.status_code == 400
    assert res.json()["code"] == "original_password_empty"

    res = client.put("/users/me/password", json={"old_password": "nope", "new_password": "changed"}, headers=headers)
    assert res.json()["code"] == "original_password_incorrect"

    res = client.put("/users/me/password", json={"old_password": "secret", "new_password": "changed"}, headers=headers)
    assert res.status_code == 204
    assert client.post("/auth/login", json={"phone": "13800000000", "password": "changed"}).status_code == 200


def test_logout_ends_session(client):
    _register_and_login(client)
    assert client.get("/users/me").status_code == 200

    assert client.post("/auth/logout").status_code == 204

    assert client.get("/users/me").status_code == 401


def test_reset_password_flow(client):
    client.post("/auth/register", json={"phone": "555-0100", "password": "secret"})

    token = client.post("/auth/password/reset-token", json={"phone": "555-0100"}).json()["token"]
    res = client.post("/auth/password/reset", json={"token": token, "password": "fresh-pass"})
    assert res.status_code == 204

    res = client.post("/auth/password/reset", json={"token": token, "password": "again-pass"})
    assert res.status_code == 400
    assert res.json()["code"] == "invalid_reset_token"
    assert client.post("/auth/login", json={"phone": "555-0100", "password": "fresh-pass"}).status_code == 200


def test_reset_token_for_unknown_phone_is_not_found(client):
    res = client.post("/auth/password/reset-token", json={"phone": "555-0199"})

    assert res.status_code == 404
    assert res.json()["code"] == "account_not_found"


def test_token_store_outage_is_service_unavailable(client, service, monkeypatch):
    client.post("/auth/register", json={"phone": "555-0100", "password": "secret"})

    def down(*args, **kwargs):
        raise TokenStoreError("Connection failed")

    monkeypatch.setattr(service.token_store, "set", down)

    res = client.post("/auth/password/reset-token", json={"phone": "555-0100"})
    assert res.status_code == 503
