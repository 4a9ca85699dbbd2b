# ============================================================
# settings.py — Configuration du service Reservation
# ------------------------------------------------------------
# Toute la configuration vient des variables d'environnement
# (docker-compose / .env). Valeurs par défaut pour le dev local.
# ============================================================
import os
import secrets

# Base de données (SQLite en local, PostgreSQL en conteneur)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./reservations.db")

# Broker des événements (notifications)
RABBITMQ_HOST = os.getenv("RABBITMQ_HOST", "localhost")

# Adresse de l'opérateur, en copie de chaque confirmation
OPERATOR_EMAIL = os.getenv("OPERATOR_EMAIL", "")

# Identifiants du panneau admin
ADMIN_USER = os.getenv("ADMIN_USER", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")


# Secret du cookie de session. Sans SESSION_SECRET, clé aléatoire
# propre au processus : les sessions ne survivent pas à un redémarrage.
def session_secret() -> str:
    return os.getenv("SESSION_SECRET") or secrets.token_urlsafe(32)


SESSION_SECRET = session_secret()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
