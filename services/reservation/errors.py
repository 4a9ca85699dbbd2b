# ============================================================
# errors.py — Erreurs métier du service Reservation
# ------------------------------------------------------------
# Chaque type d'erreur correspond à une réponse HTTP distincte :
#   - ValidationError   → 400 (champs obligatoires manquants)
#   - ConflictError     → 409 (créneau déjà réservé)
#   - StorageError      → 500 (échec lecture/écriture en base)
#   - NotificationError → jamais propagée, seulement loggée
# ============================================================


class ReservationError(Exception):
    """Base de toutes les erreurs du service."""


class ValidationError(ReservationError):
    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(f"missing required fields: {', '.join(self.missing)}")


class ConflictError(ReservationError):
    def __init__(self, date: str, time: str, field: str):
        self.date = date
        self.time = time
        self.field = field
        super().__init__(f"field {field} is already booked on {date} at {time}")


class StorageError(ReservationError):
    pass


class NotificationError(ReservationError):
    pass
