"""Tests for POST /register."""

from __future__ import annotations

from fastapi.testclient import TestClient

from app.api.dependencies import in_memory_repos
from app.services import password_service


def _register(client: TestClient, email: str = "new@example.com", **overrides):
    body = {"name": "New Student", "email": email, "password": "s3cret-pass"}
    body.update(overrides)
    return client.post("/register", json=body)


def test_register_success(client: TestClient) -> None:
    resp = _register(client)
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["user"]["email"] == "new@example.com"
    assert body["user"]["role"] == "student"
    assert "registeredAt" in body["user"]


def test_register_never_echoes_password(client: TestClient) -> None:
    resp = _register(client)
    text = resp.text
    assert "s3cret-pass" not in text
    assert "password" not in resp.json()["user"]
    assert "argon2" not in text


def test_register_stores_salted_hash(client: TestClient) -> None:
    _register(client, email="a@example.com")
    _register(client, email="b@example.com")
    a = in_memory_repos.users._by_email["a@example.com"]  # type: ignore[attr-defined]
    b = in_memory_repos.users._by_email["b@example.com"]  # type: ignore[attr-defined]
    assert a.password_hash != "s3cret-pass"
    assert a.password_hash != b.password_hash  # same password, different salt
    assert password_service.verify_password("s3cret-pass", a.password_hash)


def test_register_duplicate_email_returns_400(client: TestClient) -> None:
    assert _register(client).status_code == 201
    resp = _register(client, name="Someone Else")
    assert resp.status_code == 400
    assert resp.json()["detail"]["message"] == "User already exists"
    assert len(in_memory_repos.users._by_email) == 1  # type: ignore[attr-defined]


def test_register_duplicate_is_case_insensitive(client: TestClient) -> None:
    _register(client, email="Mixed@Example.com")
    resp = _register(client, email="  mixed@example.COM ")
    assert resp.status_code == 400


def test_register_rejects_invalid_email(client: TestClient) -> None:
    resp = _register(client, email="not-an-email")
    assert resp.status_code == 400
    assert resp.json()["detail"]["message"] == "invalid email address"


def test_register_rejects_missing_fields(client: TestClient) -> None:
    resp = client.post("/register", json={"email": "x@example.com"})
    assert resp.status_code == 400
    assert resp.json()["detail"]["message"] == "Invalid request"
