# ============================================================
# ui.py — Panneau d'administration (FastAPI + Jinja2)
# ------------------------------------------------------------
# Pages HTML pour l'opérateur :
#  - connexion / déconnexion
#  - tableau des réservations (tri date puis heure)
#  - suppression d'une réservation
# Aucune logique métier ici : tout passe par ReservationService
# (réutilise get_service de l'API).
# ============================================================
import logging
from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from api import get_service
from auth import AdminSession, CredentialVerifier, check_csrf, current_admin, get_verifier, login, logout, require_admin_page
from errors import StorageError
from service import ReservationService

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

router = APIRouter(prefix="/admin")


def fmt_created(dt):
    if dt is None:
        return ""
    return dt.strftime("%Y-%m-%d %H:%M:%S")


templates.env.filters["created"] = fmt_created


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request):
    if current_admin(request):
        return RedirectResponse("/admin/reservations", status_code=303)
    return templates.TemplateResponse(request, "login.html", {"error": None})


# Vérification via la stratégie injectée (get_verifier)
@router.post("/login", response_class=HTMLResponse)
def login_submit(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    verifier: CredentialVerifier = Depends(get_verifier),
):
    if not verifier.verify(username, password):
        logger.warning("failed admin login for %r", username)
        return templates.TemplateResponse(
            request, "login.html", {"error": "Invalid credentials"}, status_code=401
        )
    login(request, username)
    return RedirectResponse("/admin/reservations", status_code=303)


@router.get("/logout")
def logout_page(request: Request):
    logout(request)
    return RedirectResponse("/admin/login", status_code=303)


# Tableau de toutes les réservations
@router.get("/reservations", response_class=HTMLResponse)
def reservations_page(
    request: Request,
    admin: AdminSession = Depends(require_admin_page),
    svc: ReservationService = Depends(get_service),
):
    try:
        rows = svc.list_all()
    except StorageError:
        logger.exception("list query failed")
        return PlainTextResponse("Could not load reservations", status_code=500)
    return templates.TemplateResponse(request, "reservations.html", {"rows": rows, "admin": admin})


# Suppression depuis le formulaire du tableau (POST + jeton CSRF),
# puis retour au tableau
@router.post("/reservations/{reservation_id}/delete")
def delete_page(
    reservation_id: int,
    csrf_token: str = Form(""),
    admin: AdminSession = Depends(require_admin_page),
    svc: ReservationService = Depends(get_service),
):
    if not check_csrf(admin, csrf_token):
        logger.warning("rejected delete of #%s: bad csrf token", reservation_id)
        return PlainTextResponse("Forbidden", status_code=403)
    try:
        deleted = svc.delete(reservation_id)
    except StorageError:
        logger.exception("could not delete reservation #%s", reservation_id)
        return PlainTextResponse("Could not delete the reservation", status_code=500)
    if not deleted:
        return PlainTextResponse("Reservation not found", status_code=404)
    return RedirectResponse("/admin/reservations", status_code=303)
