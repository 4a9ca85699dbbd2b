# ============================================================
# app.py — Point d’entrée du service Reservation
# ------------------------------------------------------------
# Ce module initialise l’application FastAPI :
#   - configure les logs
#   - crée les tables au démarrage
#   - installe la session signée (panneau admin)
#   - monte les routes API (JSON) et l’interface admin (HTML)
# Lancement : uvicorn app:app
# ============================================================
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

from api import router
from auth import LoginRequired
from db import init_db
from settings import LOG_LEVEL, SESSION_SECRET
from ui import router as ui_router

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def create_app(create_tables: bool = True) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # crée la table reservation (avec sa contrainte unique)
        if create_tables:
            init_db()
        yield

    app = FastAPI(title="Reservation Service", lifespan=lifespan)
    app.add_middleware(SessionMiddleware, secret_key=SESSION_SECRET, same_site="lax")

    # Pages admin sans session → page de connexion
    @app.exception_handler(LoginRequired)
    async def login_required(request: Request, exc: LoginRequired):
        return RedirectResponse("/admin/login", status_code=303)

    @app.get("/health")
    def health():
        return {"ok": True}

    app.include_router(router)
    app.include_router(ui_router)
    return app


app = create_app()
