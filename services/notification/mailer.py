# ============================================================
# mailer.py — Envoi SMTP des confirmations de réservation
# ------------------------------------------------------------
# Rend le courriel HTML (Jinja2) à partir du payload de
# "ReservationCreated" puis l'envoie à tous les destinataires
# (client + opérateur) en un seul message.
# ============================================================
import logging
import os
import smtplib
from email.message import EmailMessage
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

logger = logging.getLogger(__name__)

SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_FROM = os.getenv("SMTP_FROM", "")

_ENV = Environment(
    loader=FileSystemLoader(Path(__file__).resolve().parent / "templates"),
    autoescape=select_autoescape(["html"]),
)


def build_confirmation(payload: dict, sender: str = SMTP_FROM) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = f"Reservation #{payload['reservationId']} confirmed"
    msg["From"] = sender or SMTP_USER or "no-reply@localhost"
    msg["To"] = ", ".join(payload["recipients"])
    msg.set_content(
        f"Reservation #{payload['reservationId']}: field {payload['field']} "
        f"on {payload['date']} at {payload['time']}."
    )
    msg.add_alternative(_ENV.get_template("confirmation.html").render(**payload), subtype="html")
    return msg


# Retourne False si SMTP n'est pas configuré (envoi ignoré).
# Les erreurs de transport remontent à l'appelant.
def send_confirmation(payload: dict) -> bool:
    if not SMTP_HOST:
        logger.info("[mailer] SMTP not configured; skipping email to %s", payload.get("recipients"))
        return False
    msg = build_confirmation(payload)
    with smtplib.SMTP(SMTP_HOST, SMTP_PORT, timeout=10) as server:
        if SMTP_USER and SMTP_PASSWORD:
            server.starttls()
            server.login(SMTP_USER, SMTP_PASSWORD)
        server.send_message(msg)
    logger.info("[mailer] confirmation #%s sent to %s", payload["reservationId"], msg["To"])
    return True
