"""Reservation service tests: validation, conflicts, notification."""
from __future__ import annotations

import logging
import threading

import pytest
from sqlmodel import Session

from conftest import FakeNotifier, make_input
from errors import ConflictError, ValidationError
from repository import ReservationRepository
from service import ReservationService


def test_create_notifies_requester_and_operator(service: ReservationService, notifier: FakeNotifier) -> None:
    created = service.create(make_input())

    assert created.id == 1
    assert notifier.sent == [(1, ["a@x.com", "ops@field.test"])]


@pytest.mark.parametrize("missing", ["name", "email", "date", "time", "field"])
def test_missing_field_is_rejected_without_side_effect(
    service: ReservationService, repo: ReservationRepository, notifier: FakeNotifier, missing: str
) -> None:
    with pytest.raises(ValidationError) as excinfo:
        service.create(make_input(**{missing: "   "}))

    assert excinfo.value.missing == [missing]
    assert len(repo.list_all()) == 0
    assert notifier.sent == []


def test_validation_lists_every_missing_field(service: ReservationService) -> None:
    with pytest.raises(ValidationError) as excinfo:
        service.create(make_input(name=None, field=""))

    assert excinfo.value.missing == ["name", "field"]


def test_values_are_stripped(service: ReservationService) -> None:
    created = service.create(make_input(name="  Ana ", field=" A"))

    assert created.name == "Ana"
    assert created.field == "A"
    assert service.is_available("2024-06-01", "10:00", "A") is False


def test_conflict_does_not_insert_or_notify(
    service: ReservationService, repo: ReservationRepository, notifier: FakeNotifier
) -> None:
    service.create(make_input())

    with pytest.raises(ConflictError):
        service.create(make_input(name="Bruno", email="b@x.com"))

    assert len(repo.list_all()) == 1
    assert len(notifier.sent) == 1


def test_availability_after_create(service: ReservationService) -> None:
    assert service.is_available("2024-06-01", "10:00", "A") is True

    service.create(make_input())

    assert service.is_available("2024-06-01", "10:00", "A") is False
    assert "10:00" in service.list_occupied_times("2024-06-01", "A")
    assert service.is_available("2024-06-01", "10:00", "B") is True


def test_notification_failure_does_not_affect_create(repo: ReservationRepository, caplog) -> None:
    svc = ReservationService(repo, FakeNotifier(fail=True), operator_email="ops@field.test")

    with caplog.at_level(logging.ERROR, logger="service"):
        created = svc.create(make_input())

    assert created.id is not None
    assert repo.get(created.id) is not None
    assert "notification failed for reservation #1" in caplog.text


def test_notification_runs_through_scheduler(repo: ReservationRepository, notifier: FakeNotifier) -> None:
    queued = []
    svc = ReservationService(repo, notifier, schedule=lambda fn, *args: queued.append((fn, args)))

    created = svc.create(make_input())

    # nothing sent until the scheduled task runs
    assert notifier.sent == []
    fn, args = queued[0]
    fn(*args)
    assert notifier.sent == [(created.id, ["a@x.com"])]


def test_pre_check_race_is_caught_by_constraint(repo: ReservationRepository, notifier: FakeNotifier) -> None:
    svc = ReservationService(repo, notifier)
    svc.create(make_input())
    # simulate a stale availability answer
    svc.availability.is_available = lambda *slot: True

    with pytest.raises(ConflictError):
        svc.create(make_input(name="Bruno", email="b@x.com"))

    assert len(repo.list_all()) == 1
    assert len(notifier.sent) == 1


class _RacingRepository(ReservationRepository):
    """Holds every caller after the pre-check so both reach the insert."""

    def __init__(self, session: Session, barrier: threading.Barrier) -> None:
        super().__init__(session)
        self.barrier = barrier

    def find_by_slot(self, date: str, time: str, field: str):
        found = super().find_by_slot(date, time, field)
        self.barrier.wait()
        return found


def test_concurrent_creates_for_same_slot(engine) -> None:
    barrier = threading.Barrier(2, timeout=10)
    results: dict[str, object] = {}

    def book(name: str) -> None:
        with Session(engine) as s:
            svc = ReservationService(_RacingRepository(s, barrier), FakeNotifier())
            try:
                results[name] = svc.create(make_input(name=name, email=f"{name.lower()}@x.com")).id
            except ConflictError as e:
                results[name] = e

    threads = [threading.Thread(target=book, args=(n,)) for n in ("Ana", "Bruno")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    outcomes = list(results.values())
    assert sum(isinstance(o, int) for o in outcomes) == 1
    assert sum(isinstance(o, ConflictError) for o in outcomes) == 1
    with Session(engine) as s:
        assert len(ReservationRepository(s).list_all()) == 1


def test_booking_scenario(service: ReservationService) -> None:
    first = service.create(make_input())
    assert first.id == 1

    with pytest.raises(ConflictError):
        service.create(make_input(name="Bruno"))

    assert service.list_occupied_times("2024-06-01", "A") == ["10:00"]
    assert service.delete(1) is True
    assert service.delete(1) is False

    again = service.create(make_input(name="Bruno"))
    assert again.id == 2
