# ============================================================
# availability.py — Disponibilité des créneaux
# ------------------------------------------------------------
# Lecture seule. Utilisé par le service avant l'insertion
# (échec rapide) et directement par la route "occupied-times"
# pour griser les heures déjà prises côté client.
# ============================================================
from repository import ReservationRepository


class AvailabilityChecker:
    def __init__(self, repo: ReservationRepository):
        self.repo = repo

    def is_available(self, date: str, time: str, field: str) -> bool:
        return self.repo.find_by_slot(date, time, field) is None

    def occupied_times(self, date: str, field: str) -> list[str]:
        return self.repo.list_occupied_times(date, field)
