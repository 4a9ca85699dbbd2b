# ============================================================
# Reservation API Router
# ------------------------------------------------------------
# Expose les endpoints REST pour créer une réservation, consulter
# les heures occupées d'un terrain et, côté admin, lister et
# supprimer les réservations. Les erreurs métier sont traduites
# en codes HTTP ; aucun détail interne n'est renvoyé au client.
# ============================================================
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlmodel import Session

from auth import AdminSession, require_admin
from db import get_session
from errors import ConflictError, StorageError, ValidationError
from models import Reservation, ReservationInput
from notifier import Notifier, get_notifier
from repository import ReservationRepository
from service import ReservationService
from settings import OPERATOR_EMAIL

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


# Un service par requête : session DB propre + tâches de fond
# de la requête pour la notification
def get_service(
    background_tasks: BackgroundTasks,
    s: Session = Depends(get_session),
    notifier: Notifier = Depends(get_notifier),
) -> ReservationService:
    return ReservationService(
        ReservationRepository(s),
        notifier,
        operator_email=OPERATOR_EMAIL,
        schedule=background_tasks.add_task,
    )


def conflict_message(e: ConflictError) -> str:
    return f"Field {e.field} is already booked on {e.date} at {e.time}."


# ------------------------------------------------------------
# POST /api/reservations — Créer une réservation
# ------------------------------------------------------------
# 201 créée | 400 champs manquants | 409 créneau pris | 500 base
# Le courriel part en tâche de fond, après la réponse.
# ------------------------------------------------------------
@router.post("/reservations", status_code=201)
def create_reservation(data: ReservationInput, svc: ReservationService = Depends(get_service)):
    try:
        created = svc.create(data)
    except ValidationError as e:
        raise HTTPException(400, f"Missing required fields: {', '.join(e.missing)}")
    except ConflictError as e:
        raise HTTPException(409, conflict_message(e))
    except StorageError:
        logger.exception("could not save reservation")
        raise HTTPException(500, "Could not save the reservation.")
    return {
        "ok": True,
        "id": created.id,
        "message": f"Reservation #{created.id} confirmed for field {created.field} on {created.date} at {created.time}.",
    }


# ------------------------------------------------------------
# GET /api/occupied-times — Heures déjà réservées
# ------------------------------------------------------------
@router.get("/occupied-times")
def occupied_times(
    date: str = Query(..., min_length=1),
    field: str = Query(..., min_length=1),
    svc: ReservationService = Depends(get_service),
):
    try:
        times = svc.list_occupied_times(date, field)
    except StorageError:
        logger.exception("occupied times query failed")
        raise HTTPException(500, "Could not load occupied times.")
    return {"ok": True, "times": times}


@router.get("/availability")
def availability(
    date: str = Query(..., min_length=1),
    time: str = Query(..., min_length=1),
    field: str = Query(..., min_length=1),
    svc: ReservationService = Depends(get_service),
):
    try:
        available = svc.is_available(date, time, field)
    except StorageError:
        logger.exception("availability query failed")
        raise HTTPException(500, "Could not check availability.")
    return {"ok": True, "available": available}


# ------------------------------------------------------------
# Routes admin — exigent une AdminSession (403 sinon)
# ------------------------------------------------------------
@router.get("/reservations", response_model=list[Reservation])
def list_reservations(
    admin: AdminSession = Depends(require_admin),
    svc: ReservationService = Depends(get_service),
):
    try:
        return svc.list_all()
    except StorageError:
        logger.exception("list query failed")
        raise HTTPException(500, "Could not load reservations.")


@router.get("/reservations/{reservation_id}", response_model=Reservation)
def get_reservation(
    reservation_id: int,
    admin: AdminSession = Depends(require_admin),
    svc: ReservationService = Depends(get_service),
):
    try:
        r = svc.get(reservation_id)
    except StorageError:
        logger.exception("reservation lookup failed")
        raise HTTPException(500, "Could not load the reservation.")
    if not r:
        raise HTTPException(404, "not found")
    return r


@router.delete("/reservations/{reservation_id}")
def delete_reservation(
    reservation_id: int,
    admin: AdminSession = Depends(require_admin),
    svc: ReservationService = Depends(get_service),
):
    try:
        deleted = svc.delete(reservation_id)
    except StorageError:
        logger.exception("could not delete reservation #%s", reservation_id)
        raise HTTPException(500, "Could not delete the reservation.")
    if not deleted:
        raise HTTPException(404, "not found")
    logger.info("reservation #%s deleted by %s", reservation_id, admin.username)
    return {"ok": True}
