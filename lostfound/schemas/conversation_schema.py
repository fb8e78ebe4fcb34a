from pydantic import BaseModel, ConfigDict, Field
from typing import List
from datetime import datetime
from lostfound.models.enums import PostType
from lostfound.schemas.user_schema import UserSummary

class ConversationCreate(BaseModel):
    post_id: int
    recipient_id: int

class MessageCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)

class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    conversation_id: int
    sender_id: int
    content: str
    is_read: bool
    created_at: datetime

class ConversationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    user1_id: int
    user2_id: int
    last_message_at: datetime
    created_at: datetime

class PostSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    type: PostType

class ConversationSummary(ConversationResponse):
    """One entry of a user's inbox; messages run oldest first"""
    messages: List[MessageResponse] = []
    post: PostSummary
    other_user: UserSummary
    unread_count: int = 0

class MarkReadResponse(BaseModel):
    conversation_id: int
    marked_read: int
