# ============================================================
# repository.py — Accès aux données Reservation
# ------------------------------------------------------------
# Design pattern "Repository" pour la table Reservation.
# Isole SQLModel/SQLAlchemy du reste du service : les erreurs
# de base remontent sous forme d'erreurs métier
#   - violation de la contrainte unique → ConflictError
#   - toute autre erreur SQLAlchemy     → StorageError
# ============================================================
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from errors import ConflictError, StorageError
from models import Reservation, ReservationInput


class ReservationRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_by_slot(self, date: str, time: str, field: str):
        try:
            return self.session.exec(
                select(Reservation).where(
                    Reservation.date == date,
                    Reservation.time == time,
                    Reservation.field == field,
                )
            ).first()
        except SQLAlchemyError as e:
            raise StorageError("slot lookup failed") from e

    def get(self, reservation_id: int):
        try:
            return self.session.get(Reservation, reservation_id)
        except SQLAlchemyError as e:
            raise StorageError("reservation lookup failed") from e

    # Insertion atomique : soit la ligne est commitée, soit rien
    # n'est visible (rollback). La contrainte uq_reservation_slot
    # tranche entre deux insertions concurrentes.
    def insert(self, data: ReservationInput) -> Reservation:
        r = Reservation(
            name=data.name,
            email=data.email,
            phone=data.phone or "",
            date=data.date,
            time=data.time,
            field=data.field,
            comment=data.comment or "",
        )
        self.session.add(r)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise ConflictError(data.date, data.time, data.field) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError("insert failed") from e
        self.session.refresh(r)
        return r

    def list_occupied_times(self, date: str, field: str) -> list[str]:
        try:
            return list(self.session.exec(
                select(Reservation.time).where(
                    Reservation.date == date,
                    Reservation.field == field,
                )
            ).all())
        except SQLAlchemyError as e:
            raise StorageError("occupied times query failed") from e

    # Tri par date puis heure (ISO → ordre lexicographique = chronologique)
    def list_all(self) -> list[Reservation]:
        try:
            return list(self.session.exec(
                select(Reservation).order_by(Reservation.date, Reservation.time, Reservation.id)
            ).all())
        except SQLAlchemyError as e:
            raise StorageError("list query failed") from e

    # Idempotent : supprimer un id inexistant n'est pas une erreur
    def delete_by_id(self, reservation_id: int) -> bool:
        r = self.get(reservation_id)
        if r is None:
            return False
        try:
            self.session.delete(r)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError("delete failed") from e
        return True
