# ============================================================
# service.py — Logique métier des réservations
# ------------------------------------------------------------
# create() enchaîne :
#   1. validation des champs obligatoires
#   2. vérification de disponibilité (échec rapide)
#   3. insertion ; la contrainte unique en base reste l'arbitre
#      final si deux requêtes visent le même créneau
#   4. notification best-effort, planifiée après le commit
# Le service ne garde aucun état : tout passe par la base.
# ============================================================
import logging
from typing import Callable, Optional

from availability import AvailabilityChecker
from errors import ConflictError, ValidationError
from models import Reservation, ReservationInput
from notifier import Notifier, recipients_for
from repository import ReservationRepository

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "email", "date", "time", "field")


def _run_now(fn, *args):
    fn(*args)


class ReservationService:
    """Création, consultation et suppression des réservations.

    ``schedule`` reçoit la tâche de notification et ses arguments ;
    la couche HTTP y passe ``BackgroundTasks.add_task`` pour que le
    courriel parte après la réponse. Par défaut elle s'exécute tout
    de suite.
    """

    def __init__(
        self,
        repo: ReservationRepository,
        notifier: Notifier,
        operator_email: str = "",
        schedule: Optional[Callable] = None,
    ):
        self.repo = repo
        self.availability = AvailabilityChecker(repo)
        self.notifier = notifier
        self.operator_email = operator_email
        self.schedule = schedule or _run_now

    def validate(self, data: ReservationInput) -> ReservationInput:
        cleaned = {k: (v.strip() if isinstance(v, str) else v) for k, v in data.model_dump().items()}
        missing = [f for f in REQUIRED_FIELDS if not cleaned.get(f)]
        if missing:
            raise ValidationError(missing)
        cleaned["phone"] = cleaned.get("phone") or ""
        cleaned["comment"] = cleaned.get("comment") or ""
        return ReservationInput(**cleaned)

    def create(self, data: ReservationInput) -> Reservation:
        data = self.validate(data)
        if not self.availability.is_available(data.date, data.time, data.field):
            raise ConflictError(data.date, data.time, data.field)
        # ConflictError possible ici aussi : un autre client a pris le créneau
        # entre la vérification et l'insertion
        created = self.repo.insert(data)
        logger.info("reservation #%s created: field=%s %s %s", created.id, created.field, created.date, created.time)
        self.schedule(self._notify, created, recipients_for(created, self.operator_email))
        return created

    # Une seule tentative ; un échec ne remet jamais en cause la réservation
    def _notify(self, reservation: Reservation, recipients: list[str]) -> None:
        if not recipients:
            return
        try:
            self.notifier.send(reservation, recipients)
        except Exception:
            logger.exception("notification failed for reservation #%s", reservation.id)

    def is_available(self, date: str, time: str, field: str) -> bool:
        return self.availability.is_available(date, time, field)

    def list_occupied_times(self, date: str, field: str) -> list[str]:
        return self.availability.occupied_times(date, field)

    def list_all(self) -> list[Reservation]:
        return self.repo.list_all()

    def get(self, reservation_id: int):
        return self.repo.get(reservation_id)

    def delete(self, reservation_id: int) -> bool:
        deleted = self.repo.delete_by_id(reservation_id)
        if deleted:
            logger.info("reservation #%s deleted", reservation_id)
        return deleted
