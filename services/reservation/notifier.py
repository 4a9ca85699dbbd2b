# ============================================================
# notifier.py — Notification des réservations confirmées
# ------------------------------------------------------------
# Le service ne connaît que l'interface Notifier. En production
# c'est EventNotifier : il publie "ReservationCreated" et le
# service Notification envoie le courriel (client + opérateur).
# ============================================================
from typing import Callable, Iterable, Protocol

from pika.exceptions import AMQPError

from errors import NotificationError
from models import Reservation
from publisher import publish_event


class Notifier(Protocol):
    def send(self, reservation: Reservation, recipients: list[str]) -> None:
        ...


# Demandeur d'abord, opérateur ensuite ; vides et doublons retirés
def recipients_for(reservation: Reservation, operator_email: str) -> list[str]:
    out: list[str] = []
    for addr in (reservation.email, operator_email):
        addr = (addr or "").strip()
        if addr and addr not in out:
            out.append(addr)
    return out


def reservation_payload(reservation: Reservation, recipients: Iterable[str]) -> dict:
    return {
        "reservationId": reservation.id,
        "name": reservation.name,
        "email": reservation.email,
        "phone": reservation.phone,
        "date": reservation.date,
        "time": reservation.time,
        "field": reservation.field,
        "comment": reservation.comment,
        "recipients": list(recipients),
    }


class EventNotifier:
    def __init__(self, publish: Callable[[str, dict], None] = publish_event):
        self.publish = publish

    def send(self, reservation: Reservation, recipients: list[str]) -> None:
        try:
            self.publish("ReservationCreated", reservation_payload(reservation, recipients))
        except (AMQPError, OSError) as e:
            raise NotificationError(f"could not publish ReservationCreated for #{reservation.id}") from e


# Dépendance FastAPI (remplaçable dans les tests)
def get_notifier() -> Notifier:
    return EventNotifier()
