from celery import Celery
from lostfound.config import settings
import logging
from typing import Dict, Any

logger = logging.getLogger(__name__)

celery_app = Celery(
    "lostfound",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL
)

@celery_app.task(name="lostfound.send_message_notification")
def send_message_notification(recipient_id: int, message: Dict[str, Any]):
    """Forward a new-message event to the push provider"""
    logger.info(
        f"Push hand-off for user {recipient_id}: message {message['id']} "
        f"in conversation {message['conversation_id']}"
    )
    return True
