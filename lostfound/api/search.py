from fastapi import APIRouter, Depends, HTTPException, Request, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import logging

from lostfound.exceptions import LostFoundError
from lostfound.models.enums import PostType, PostCategory
from lostfound.schemas.post_schema import PostResult
from lostfound.schemas.search_schema import SearchFilters
from lostfound.services.search_service import SearchService
from lostfound.config import settings
from lostfound.db.session import get_db
from lostfound.utils.rate_limit import limiter, DEFAULT_RATE

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/posts", response_model=List[PostResult])
@limiter.limit(DEFAULT_RATE)
async def search_posts(
    request: Request,
    query: Optional[str] = Query(None, max_length=200),
    type: Optional[PostType] = Query(None),
    category: Optional[PostCategory] = Query(None),
    location: Optional[str] = Query(None, max_length=200),
    latitude: Optional[float] = Query(None, ge=-90, le=90),
    longitude: Optional[float] = Query(None, ge=-180, le=180),
    radius_km: Optional[float] = Query(None, gt=0),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db)
):
    """Search active posts; nearest first when a geo filter is given, newest first otherwise"""
    try:
        filters = SearchFilters(
            query=query,
            type=type,
            category=category,
            location=location,
            latitude=latitude,
            longitude=longitude,
            radius_km=radius_km,
            limit=limit,
            offset=offset,
        )
        search_service = SearchService(db)
        return await search_service.search(filters)

    except LostFoundError:
        raise
    except Exception as e:
        logger.error(f"Error searching posts: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to search posts"
        )

@router.get("/nearby", response_model=List[PostResult])
@limiter.limit(DEFAULT_RATE)
async def nearby_posts(
    request: Request,
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius_km: float = Query(..., gt=0),
    limit: Optional[int] = Query(None, ge=1),
    db: AsyncSession = Depends(get_db)
):
    """Active posts around a point, closest first (map feed)"""
    try:
        search_service = SearchService(db)
        return await search_service.nearby_posts(
            latitude=latitude,
            longitude=longitude,
            radius_km=radius_km,
            limit=limit
        )

    except LostFoundError:
        raise
    except Exception as e:
        logger.error(f"Error getting nearby posts: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get nearby posts"
        )
