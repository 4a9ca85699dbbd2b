"""Test fixtures for the reservation service."""
from __future__ import annotations

import os
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

os.environ.setdefault("DATABASE_URL", "sqlite://")

from app import create_app
from auth import StaticCredentialVerifier, get_verifier
from db import get_session, init_db, make_engine
from errors import NotificationError
from models import ReservationInput
from notifier import get_notifier
from repository import ReservationRepository
from service import ReservationService

ADMIN_USER = "admin"
ADMIN_PASSWORD = "s3cret"


class FakeNotifier:
    """Records every notification; raises when ``fail`` is set."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[tuple[int, list[str]]] = []

    def send(self, reservation, recipients) -> None:
        if self.fail:
            raise NotificationError("smtp down")
        self.sent.append((reservation.id, list(recipients)))


def make_input(**overrides: str) -> ReservationInput:
    data = {
        "name": "Ana",
        "email": "a@x.com",
        "date": "2024-06-01",
        "time": "10:00",
        "field": "A",
    }
    data.update(overrides)
    return ReservationInput(**data)


@pytest.fixture()
def engine(tmp_path):
    """File-backed SQLite database so several sessions see the same data."""
    e = make_engine(f"sqlite:///{tmp_path / 'reservations.db'}")
    init_db(e)
    yield e
    e.dispose()


@pytest.fixture()
def session(engine) -> Iterator[Session]:
    with Session(engine) as s:
        yield s


@pytest.fixture()
def repo(session) -> ReservationRepository:
    return ReservationRepository(session)


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def service(repo, notifier) -> ReservationService:
    return ReservationService(repo, notifier, operator_email="ops@field.test")


@pytest.fixture()
def client(engine, notifier) -> Iterator[TestClient]:
    app = create_app(create_tables=False)

    def _session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_verifier] = lambda: StaticCredentialVerifier(ADMIN_USER, ADMIN_PASSWORD)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def admin_client(client) -> TestClient:
    response = client.post(
        "/admin/login",
        data={"username": ADMIN_USER, "password": ADMIN_PASSWORD},
        follow_redirects=False,
    )
    assert response.status_code == 303
    return client
