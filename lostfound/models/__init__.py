"""
Models package for Lost & Found API
"""
from lostfound.models.base import Base, BaseModel
from lostfound.models.user import User
from lostfound.models.post import Post, PostImage
from lostfound.models.conversation import Conversation, Message

__all__ = [
    'Base',
    'BaseModel',
    'User',
    'Post',
    'PostImage',
    'Conversation',
    'Message',
]
