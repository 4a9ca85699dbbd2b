# ============================================================
# db.py — Moteur SQLModel + session par requête
# ============================================================
from sqlmodel import SQLModel, Session, create_engine

from settings import DATABASE_URL
import models  # noqa: F401  enregistre les tables dans SQLModel.metadata


def make_engine(url: str = DATABASE_URL):
    # SQLite : la connexion peut être utilisée par un autre thread
    # que celui qui l'a ouverte (threadpool FastAPI)
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


engine = make_engine()


def init_db(e=None):
    SQLModel.metadata.create_all(e or engine)


# Dépendance FastAPI : fournit une Session DB par requête, auto-close
def get_session():
    with Session(engine) as s:
        yield s
