from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_, desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
import logging

from lostfound.models.conversation import Conversation
from lostfound.schemas.conversation_schema import ConversationSummary, MessageResponse, PostSummary
from lostfound.schemas.user_schema import UserSummary
from lostfound.services.post_service import PostService
from lostfound.services.user_service import UserService
from lostfound.exceptions import ConflictError, ConversationNotFoundError, AccessDeniedError, ValidationError

logger = logging.getLogger(__name__)

def pair_matches(post_id: int, user_a: int, user_b: int):
    """Clause matching the conversation for {user_a, user_b} on a post, in either order"""
    return and_(
        Conversation.post_id == post_id,
        Conversation.participant_low == min(user_a, user_b),
        Conversation.participant_high == max(user_a, user_b),
    )

class ConversationService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.post_service = PostService(db)
        self.user_service = UserService(db)

    async def get_or_create(self, post_id: int, user_a: int, user_b: int) -> Conversation:
        """Return the conversation between two users about a post, creating it on first contact"""
        if user_a == user_b:
            raise ValidationError("A conversation needs two distinct participants")

        await self.post_service.require_post(post_id)
        await self.user_service.require_users(user_a, user_b)

        existing = await self.find(post_id, user_a, user_b)
        if existing:
            return existing

        conversation = Conversation(post_id=post_id, user1_id=user_a, user2_id=user_b)
        self.db.add(conversation)
        try:
            await self.db.commit()
        except IntegrityError:
            # A concurrent request inserted the same pair first
            await self.db.rollback()
            winner = await self.find(post_id, user_a, user_b)
            if winner is None:
                raise ConflictError("Conversation could not be created")
            logger.info(f"Reused conversation {winner.id} created concurrently for post {post_id}")
            return winner

        logger.info(f"Created conversation {conversation.id} on post {post_id} between users {user_a} and {user_b}")
        return conversation

    async def find(self, post_id: int, user_a: int, user_b: int) -> Optional[Conversation]:
        stmt = select(Conversation).where(pair_matches(post_id, user_a, user_b))
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def require_participant(
        self,
        conversation_id: int,
        user_id: int,
        for_update: bool = False
    ) -> Conversation:
        """Load a conversation the user takes part in"""
        stmt = select(Conversation).where(Conversation.id == conversation_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        conversation = result.scalar_one_or_none()

        if not conversation:
            raise ConversationNotFoundError(conversation_id)

        if not conversation.is_participant(user_id):
            raise AccessDeniedError()

        return conversation

    async def list_conversations(self, user_id: int) -> List[ConversationSummary]:
        """Every conversation of a user, most recently active first"""
        stmt = select(Conversation).options(
            selectinload(Conversation.post),
            selectinload(Conversation.messages),
            selectinload(Conversation.user1),
            selectinload(Conversation.user2),
        ).where(
            or_(
                Conversation.user1_id == user_id,
                Conversation.user2_id == user_id
            )
        ).order_by(
            desc(Conversation.last_message_at), desc(Conversation.id)
        ).execution_options(populate_existing=True)

        result = await self.db.execute(stmt)
        conversations = result.scalars().all()

        return [self._summarize(conversation, user_id) for conversation in conversations]

    def _summarize(self, conversation: Conversation, viewer_id: int) -> ConversationSummary:
        other_id = conversation.other_participant(viewer_id)
        other = conversation.user1 if conversation.user1_id == other_id else conversation.user2
        messages = [MessageResponse.model_validate(message) for message in conversation.messages]

        return ConversationSummary(
            id=conversation.id,
            post_id=conversation.post_id,
            user1_id=conversation.user1_id,
            user2_id=conversation.user2_id,
            last_message_at=conversation.last_message_at,
            created_at=conversation.created_at,
            messages=messages,
            post=PostSummary.model_validate(conversation.post),
            other_user=UserSummary.model_validate(other),
            unread_count=sum(
                1 for message in messages
                if message.sender_id != viewer_id and not message.is_read
            ),
        )
