from sqlalchemy import Column, Text, Integer, ForeignKey, Boolean, DateTime, Index, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from lostfound.models.base import BaseModel, utcnow
from lostfound.exceptions import AccessDeniedError

class Conversation(BaseModel):
    __tablename__ = "conversations"

    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False)
    # Stored in the order the caller gave; carries no meaning
    user1_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    user2_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    # min/max of the pair, backs the unordered uniqueness rule
    participant_low = Column(Integer, nullable=False)
    participant_high = Column(Integer, nullable=False)
    last_message_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    post = relationship("Post", back_populates="conversations")
    user1 = relationship("User", foreign_keys=[user1_id])
    user2 = relationship("User", foreign_keys=[user2_id])
    messages = relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by=lambda: [Message.created_at, Message.id],
    )

    __table_args__ = (
        UniqueConstraint('post_id', 'participant_low', 'participant_high', name='unique_conversation_pair'),
        CheckConstraint('user1_id <> user2_id', name='check_distinct_participants'),
        Index('ix_conversations_user1_id', 'user1_id'),
        Index('ix_conversations_user2_id', 'user2_id'),
        Index('ix_conversations_last_message_at', 'last_message_at'),
    )

    def __init__(self, **kwargs):
        user1_id = kwargs.get("user1_id")
        user2_id = kwargs.get("user2_id")
        if user1_id is not None and user2_id is not None:
            kwargs.setdefault("participant_low", min(user1_id, user2_id))
            kwargs.setdefault("participant_high", max(user1_id, user2_id))
        super().__init__(**kwargs)

    @property
    def participant_ids(self) -> tuple:
        return (self.user1_id, self.user2_id)

    def is_participant(self, user_id: int) -> bool:
        return user_id in self.participant_ids

    def other_participant(self, viewer_id: int) -> int:
        """Id of the participant who is not ``viewer_id``."""
        if viewer_id == self.user1_id:
            return self.user2_id
        if viewer_id == self.user2_id:
            return self.user1_id
        raise AccessDeniedError()

class Message(BaseModel):
    __tablename__ = "messages"

    conversation_id = Column(Integer, ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)

    # Relationships
    conversation = relationship("Conversation", back_populates="messages")
    sender = relationship("User")

    __table_args__ = (
        Index('ix_messages_conversation_created', 'conversation_id', 'created_at'),
        Index('ix_messages_sender_id', 'sender_id'),
        Index('ix_messages_is_read', 'is_read'),
    )
