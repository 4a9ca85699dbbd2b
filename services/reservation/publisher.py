# ============================================================
# publisher.py — Émission d'événements RabbitMQ
# ------------------------------------------------------------
# Publie les événements du service Reservation sur l'échange
# "events" (fanout). Le service Notification s'y abonne pour
# envoyer les courriels de confirmation.
# ============================================================
import json
import logging

import pika

from settings import RABBITMQ_HOST

logger = logging.getLogger(__name__)


# Publie un message sur l’échange "events" en mode fanout :
#
#   - event_type : nom de l’événement
#   - payload    : contenu du message
#
# Tous les consommateurs liés à l’échange reçoivent le message.
# Les erreurs de connexion remontent à l'appelant.

def publish_event(event_type: str, payload: dict, host: str = RABBITMQ_HOST):
    conn = pika.BlockingConnection(pika.ConnectionParameters(host=host))
    try:
        ch = conn.channel()
        # durable=True pour survivre aux redémarrages RabbitMQ
        ch.exchange_declare(exchange="events", exchange_type="fanout", durable=True)
        message = {"type": event_type, "payload": payload}
        ch.basic_publish(exchange="events", routing_key="", body=json.dumps(message))
        logger.info("[event] %s %s", event_type, payload)
    finally:
        conn.close()
