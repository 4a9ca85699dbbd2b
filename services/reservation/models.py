# ============================================================
# models.py — Modèles de données SQLModel (Reservation Service)
# ------------------------------------------------------------
#   1️. Reservation : table des réservations de terrains
#   2️. ReservationInput : payload client (non persisté)
# ============================================================
from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from datetime import datetime, timezone
from typing import Optional


# ------------------------------------------------------------
# Reservation
# ------------------------------------------------------------
# Un créneau = (date, time, field). La contrainte unique en base
# est la seule garantie contre la double réservation, même avec
# des requêtes concurrentes.
# sqlite_autoincrement : un id supprimé n'est jamais réattribué.
# ------------------------------------------------------------
class Reservation(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("date", "time", "field", name="uq_reservation_slot"),
        {"sqlite_autoincrement": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str
    phone: str = ""
    date: str = Field(index=True)     # YYYY-MM-DD
    time: str                         # HH:MM
    field: str
    comment: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# Tous les champs sont optionnels ici : c'est le service, pas
# FastAPI, qui signale les champs manquants (ValidationError).
class ReservationInput(SQLModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    field: Optional[str] = None
    comment: Optional[str] = None
