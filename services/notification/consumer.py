# ============================================================
# Notification Service — RabbitMQ Consumer
# ------------------------------------------------------------
# Écoute l'échange "events" et envoie le courriel de
# confirmation pour chaque "ReservationCreated".
# Best-effort : une seule tentative, un échec est loggé puis
# le message est abandonné (pas de retry).
# ============================================================
import json
import logging
import os
import smtplib
import time

import pika
from pika.exceptions import AMQPError

from mailer import send_confirmation

logger = logging.getLogger(__name__)

RABBIT = os.getenv("RABBITMQ_HOST", "rabbitmq")


def on_message(ch, method, properties, body):
    try:
        msg = json.loads(body)
    except ValueError as e:
        logger.warning("[notification] bad payload: %s", e)
        return

    if msg.get("type") != "ReservationCreated":
        return

    payload = msg.get("payload", {})
    if not payload.get("recipients"):
        logger.info("[notification] no recipients for #%s, skipping", payload.get("reservationId"))
        return

    try:
        send_confirmation(payload)
    except (smtplib.SMTPException, OSError):
        logger.exception("[notification] email failed for reservation #%s", payload.get("reservationId"))


#  Boucle de connexion + consommation RabbitMQ

def start_consumer():
    while True:
        try:
            logger.info("[notification] connecting to rabbitmq at %s...", RABBIT)
            conn = pika.BlockingConnection(pika.ConnectionParameters(RABBIT, heartbeat=60))
            ch = conn.channel()
            ch.exchange_declare(exchange="events", exchange_type="fanout", durable=True)
            q = ch.queue_declare(queue="", exclusive=True).method.queue
            ch.queue_bind(exchange="events", queue=q)
            logger.info("[notification] bound to 'events'. waiting...")
            ch.basic_consume(queue=q, on_message_callback=on_message, auto_ack=True)
            ch.start_consuming()
        except (AMQPError, OSError) as e:
            logger.warning("[notification] connection error: %s, retrying in 5s", e)
            time.sleep(5)
