# ============================================================
# auth.py — Accès au panneau d'administration
# ------------------------------------------------------------
#  - CredentialVerifier : stratégie de vérification (interface)
#  - StaticCredentialVerifier : couple user/mot de passe configuré
#  - AdminSession : jeton obtenu uniquement via require_admin(),
#    passé explicitement aux routes de liste et de suppression
# La session est portée par le cookie signé de SessionMiddleware.
# ============================================================
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from fastapi import HTTPException, Request, status

from settings import ADMIN_USER, ADMIN_PASSWORD

SESSION_KEY = "admin"


class CredentialVerifier(Protocol):
    def verify(self, username: str, password: str) -> bool:
        ...


class StaticCredentialVerifier:
    def __init__(self, username: str, password: str):
        self.username = username
        self.password = password

    def verify(self, username: str, password: str) -> bool:
        # un mot de passe vide en config désactive le panneau
        if not self.password:
            return False
        user_ok = secrets.compare_digest(username.encode(), self.username.encode())
        pass_ok = secrets.compare_digest(password.encode(), self.password.encode())
        return user_ok and pass_ok


@dataclass(frozen=True)
class AdminSession:
    username: str
    logged_in_at: str
    csrf_token: str


def login(request: Request, username: str) -> AdminSession:
    admin = AdminSession(
        username=username,
        logged_in_at=datetime.now(timezone.utc).isoformat(),
        csrf_token=secrets.token_urlsafe(16),
    )
    request.session[SESSION_KEY] = {
        "username": admin.username,
        "logged_in_at": admin.logged_in_at,
        "csrf_token": admin.csrf_token,
    }
    return admin


def logout(request: Request) -> None:
    request.session.clear()


def current_admin(request: Request):
    data = request.session.get(SESSION_KEY)
    if not data:
        return None
    return AdminSession(
        username=data["username"],
        logged_in_at=data["logged_in_at"],
        csrf_token=data.get("csrf_token", ""),
    )


# Jeton anti-CSRF des formulaires du panneau (un par session)
def check_csrf(admin: AdminSession, token: str) -> bool:
    if not admin.csrf_token:
        return False
    return secrets.compare_digest(token.encode(), admin.csrf_token.encode())


# Dépendance FastAPI pour l'API JSON : 403 sans session admin
def require_admin(request: Request) -> AdminSession:
    admin = current_admin(request)
    if admin is None:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "forbidden")
    return admin


class LoginRequired(Exception):
    """Levée par les pages HTML ; app.py la convertit en redirection vers /admin/login."""


# Même contrôle pour les pages HTML, mais redirection au lieu de 403
def require_admin_page(request: Request) -> AdminSession:
    admin = current_admin(request)
    if admin is None:
        raise LoginRequired()
    return admin


def get_verifier() -> CredentialVerifier:
    return StaticCredentialVerifier(ADMIN_USER, ADMIN_PASSWORD)
