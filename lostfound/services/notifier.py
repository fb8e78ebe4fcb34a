"""
Hand-off of new-message events to the external push channel.

The messaging service only announces that a message exists; delivery to
devices happens outside this application, behind the Celery task.
"""
from typing import Protocol
import logging

from fastapi.concurrency import run_in_threadpool

from lostfound.models.conversation import Message

logger = logging.getLogger(__name__)

class MessageNotifier(Protocol):
    async def message_created(self, message: Message, recipient_id: int) -> None:
        ...

def message_payload(message: Message) -> dict:
    return {
        "id": message.id,
        "conversation_id": message.conversation_id,
        "sender_id": message.sender_id,
        "content": message.content,
        "created_at": message.created_at.isoformat(),
    }

class PushNotifier:
    """Queues a push task per new message"""

    async def message_created(self, message: Message, recipient_id: int) -> None:
        from lostfound.tasks.push_tasks import send_message_notification

        payload = message_payload(message)
        # apply_async talks to the broker synchronously
        await run_in_threadpool(
            send_message_notification.apply_async,
            args=(recipient_id, payload),
            ignore_result=True,
        )
        logger.debug(f"Queued push for message {message.id} to user {recipient_id}")

def get_notifier() -> MessageNotifier:
    """Dependency providing the notifier used by the messaging routes"""
    return PushNotifier()
