from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from lostfound.schemas.post_schema import PostResult
from lostfound.services.post_service import PostService
from lostfound.config import settings
from lostfound.db.session import get_db
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/", response_model=List[PostResult])
async def get_posts(
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db)
):
    """Get posts with pagination, newest first"""
    try:
        post_service = PostService(db)
        return await post_service.list_posts(limit=limit, offset=offset)
    except Exception as e:
        logger.error(f"Get posts error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get posts"
        )

@router.get("/{post_id}", response_model=PostResult)
async def get_post(
    post_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Get a post by ID"""
    try:
        post_service = PostService(db)
        post = await post_service.get_post_with_images(post_id)

        if not post:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Post not found"
            )

        return post
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Get post error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get post"
        )
