from typing import List, Optional
from datetime import timedelta
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, and_, desc
import logging

from lostfound.models.base import utcnow
from lostfound.models.conversation import Conversation, Message
from lostfound.services.conversation_service import ConversationService
from lostfound.services.notifier import MessageNotifier
from lostfound.exceptions import ValidationError

logger = logging.getLogger(__name__)

class MessageService:
    """Append-only message log per conversation plus read receipts"""

    def __init__(self, db: AsyncSession, notifier: Optional[MessageNotifier] = None):
        self.db = db
        self.notifier = notifier
        self.conversation_service = ConversationService(db)

    async def append(self, conversation_id: int, sender_id: int, content: str) -> Message:
        """Add a message and bump the conversation's last-message time in one transaction"""
        if not content or not content.strip():
            raise ValidationError("Message content must not be empty")

        try:
            conversation = await self.conversation_service.require_participant(
                conversation_id, sender_id, for_update=True
            )

            sent_at = self._next_timestamp(conversation)
            message = Message(
                conversation_id=conversation.id,
                sender_id=sender_id,
                content=content,
                is_read=False,
                created_at=sent_at,
            )
            conversation.last_message_at = sent_at

            self.db.add(message)
            await self.db.commit()

        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"User {sender_id} sent message {message.id} in conversation {conversation_id}")

        await self._announce(message, conversation.other_participant(sender_id))
        return message

    async def list_and_mark_read(
        self,
        conversation_id: int,
        viewer_id: int,
        limit: int = 50,
        offset: int = 0
    ) -> List[Message]:
        """Page of messages, newest first, after marking the viewer's incoming messages read"""
        try:
            await self.conversation_service.require_participant(conversation_id, viewer_id)
            marked = await self._flip_unread(conversation_id, viewer_id)

            stmt = select(Message).where(
                Message.conversation_id == conversation_id
            ).order_by(
                desc(Message.created_at), desc(Message.id)
            ).offset(offset).limit(limit).execution_options(populate_existing=True)

            result = await self.db.execute(stmt)
            messages = list(result.scalars().all())
            await self.db.commit()

        except Exception:
            await self.db.rollback()
            raise

        if marked:
            logger.info(f"Marked {marked} messages read for user {viewer_id} in conversation {conversation_id}")

        return messages

    async def mark_read(self, conversation_id: int, viewer_id: int) -> int:
        """Mark the viewer's incoming messages read without fetching them"""
        try:
            await self.conversation_service.require_participant(conversation_id, viewer_id)
            marked = await self._flip_unread(conversation_id, viewer_id)
            await self.db.commit()

        except Exception:
            await self.db.rollback()
            raise

        if marked:
            logger.info(f"Marked {marked} messages read for user {viewer_id} in conversation {conversation_id}")

        return marked

    async def _flip_unread(self, conversation_id: int, viewer_id: int) -> int:
        # Only messages from the other participant; the viewer's own stay as they are
        stmt = update(Message).where(
            and_(
                Message.conversation_id == conversation_id,
                Message.sender_id != viewer_id,
                Message.is_read == False
            )
        ).values(is_read=True).execution_options(synchronize_session="fetch")

        result = await self.db.execute(stmt)
        return result.rowcount or 0

    def _next_timestamp(self, conversation: Conversation):
        # Strictly after the previous message so ordering and "last message" never tie
        now = utcnow()
        previous = conversation.last_message_at
        if previous is not None and now <= previous:
            return previous + timedelta(microseconds=1)
        return now

    async def _announce(self, message: Message, recipient_id: int) -> None:
        if self.notifier is None:
            return
        try:
            await self.notifier.message_created(message, recipient_id)
        except Exception as e:
            logger.error(f"Error notifying user {recipient_id} about message {message.id}: {e}")
