from fastapi import APIRouter, Depends, HTTPException, Request, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from lostfound.exceptions import LostFoundError
from lostfound.schemas.conversation_schema import (
    ConversationCreate,
    ConversationResponse,
    ConversationSummary,
    MessageCreate,
    MessageResponse,
    MarkReadResponse
)
from lostfound.services.conversation_service import ConversationService
from lostfound.services.message_service import MessageService
from lostfound.services.notifier import MessageNotifier, get_notifier
from lostfound.services.auth_service import get_current_user_id
from lostfound.config import settings
from lostfound.db.session import get_db
from lostfound.utils.rate_limit import limiter, DEFAULT_RATE

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/", response_model=ConversationResponse)
async def start_conversation(
    payload: ConversationCreate,
    current_user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Open (or reopen) the conversation with another user about a post"""
    try:
        service = ConversationService(db)
        return await service.get_or_create(
            post_id=payload.post_id,
            user_a=current_user_id,
            user_b=payload.recipient_id
        )
    except LostFoundError:
        raise
    except Exception as e:
        logger.error(f"Error creating conversation: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create conversation"
        )

@router.get("/", response_model=List[ConversationSummary])
async def get_conversations(
    current_user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Get the current user's conversations, most recent first"""
    try:
        service = ConversationService(db)
        return await service.list_conversations(current_user_id)
    except LostFoundError:
        raise
    except Exception as e:
        logger.error(f"Error getting conversations: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get conversations"
        )

@router.get("/{conversation_id}/messages", response_model=List[MessageResponse])
async def get_messages(
    conversation_id: int,
    limit: int = Query(settings.DEFAULT_MESSAGE_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    current_user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Get a page of messages (newest first); incoming messages become read"""
    try:
        service = MessageService(db)
        return await service.list_and_mark_read(
            conversation_id=conversation_id,
            viewer_id=current_user_id,
            limit=limit,
            offset=offset
        )
    except LostFoundError:
        raise
    except Exception as e:
        logger.error(f"Error getting messages: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get messages"
        )

@router.post("/{conversation_id}/messages", response_model=MessageResponse)
@limiter.limit(DEFAULT_RATE)
async def send_message(
    request: Request,
    conversation_id: int,
    payload: MessageCreate,
    current_user_id: int = Depends(get_current_user_id),
    notifier: MessageNotifier = Depends(get_notifier),
    db: AsyncSession = Depends(get_db)
):
    """Send a message in a conversation"""
    try:
        service = MessageService(db, notifier=notifier)
        return await service.append(
            conversation_id=conversation_id,
            sender_id=current_user_id,
            content=payload.content
        )
    except LostFoundError:
        raise
    except Exception as e:
        logger.error(f"Error sending message: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send message"
        )

@router.post("/{conversation_id}/read", response_model=MarkReadResponse)
async def mark_read(
    conversation_id: int,
    current_user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Mark all incoming messages in a conversation as read"""
    try:
        service = MessageService(db)
        marked = await service.mark_read(conversation_id, current_user_id)
        return MarkReadResponse(conversation_id=conversation_id, marked_read=marked)
    except LostFoundError:
        raise
    except Exception as e:
        logger.error(f"Error marking messages read: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to mark messages read"
        )
