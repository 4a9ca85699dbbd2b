"""Admin session cookie signing tests."""
from __future__ import annotations

import json
from base64 import b64encode

from fastapi.testclient import TestClient
from itsdangerous import TimestampSigner

import settings

PAYLOAD = {"name": "Ana", "email": "a@x.com", "date": "2024-06-01", "time": "10:00", "field": "A"}
ADMIN_STATE = {"admin": {"username": "admin", "logged_in_at": "2024-06-01T00:00:00+00:00", "csrf_token": "t"}}


def _signed_session(key: str) -> str:
    """Cookie value in the format written by Starlette's SessionMiddleware."""
    data = b64encode(json.dumps(ADMIN_STATE).encode())
    return TimestampSigner(key).sign(data).decode()


def test_secret_falls_back_to_random_key(monkeypatch) -> None:
    monkeypatch.delenv("SESSION_SECRET", raising=False)

    first, second = settings.session_secret(), settings.session_secret()

    assert first != second
    assert len(first) >= 32
    assert first not in ("", "change-me")


def test_secret_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("SESSION_SECRET", "from-env")

    assert settings.session_secret() == "from-env"


def test_cookie_signed_with_guessable_key_is_rejected(client: TestClient) -> None:
    client.post("/api/reservations", json=PAYLOAD)

    for key in ("change-me", "secret"):
        headers = {"Cookie": f"session={_signed_session(key)}"}
        assert client.delete("/api/reservations/1", headers=headers).status_code == 403
        assert client.get("/api/reservations", headers=headers).status_code == 403

    assert client.get(
        "/api/availability", params={"date": "2024-06-01", "time": "10:00", "field": "A"}
    ).json()["available"] is False


def test_cookie_signed_with_process_key_is_accepted(client: TestClient) -> None:
    client.post("/api/reservations", json=PAYLOAD)
    headers = {"Cookie": f"session={_signed_session(settings.SESSION_SECRET)}"}

    assert client.get("/api/reservations", headers=headers).status_code == 200
