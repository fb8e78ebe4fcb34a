from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from sqlalchemy.orm import selectinload
import logging

from lostfound.models.post import Post, PostImage
from lostfound.schemas.post_schema import PostCreate, PostResult
from lostfound.exceptions import PostNotFoundError

logger = logging.getLogger(__name__)

def hydrated(stmt):
    """Attach the images and author every post result carries"""
    return stmt.options(
        selectinload(Post.images), selectinload(Post.user)
    ).execution_options(populate_existing=True)

def to_result(post: Post, distance_km: Optional[float] = None) -> PostResult:
    result = PostResult.model_validate(post)
    result.distance_km = distance_km
    return result

class PostService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_post(self, user_id: int, post_data: PostCreate) -> Post:
        """Create a new post together with its images"""
        try:
            post = Post(
                user_id=user_id,
                title=post_data.title,
                description=post_data.description,
                type=post_data.type,
                category=post_data.category,
                location_text=post_data.location_text,
                latitude=post_data.latitude,
                longitude=post_data.longitude,
                contact_info=post_data.contact_info,
            )
            post.images = [
                PostImage(image_url=image.image_url, alt_text=image.alt_text, order_index=index)
                for index, image in enumerate(post_data.images)
            ]

            self.db.add(post)
            await self.db.commit()

            logger.info(f"Created post {post.id} by user {user_id}")
            return post

        except Exception as e:
            logger.error(f"Error creating post: {e}")
            await self.db.rollback()
            raise

    async def get_post(self, post_id: int) -> Optional[Post]:
        """Get a post by ID"""
        stmt = select(Post).where(Post.id == post_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def require_post(self, post_id: int) -> Post:
        post = await self.get_post(post_id)
        if not post:
            raise PostNotFoundError(post_id)
        return post

    async def get_post_with_images(self, post_id: int) -> Optional[PostResult]:
        """Get a post with its images and author"""
        stmt = hydrated(select(Post)).where(Post.id == post_id)
        result = await self.db.execute(stmt)
        post = result.scalar_one_or_none()

        if not post:
            return None

        return to_result(post)

    async def list_posts(self, limit: int = 20, offset: int = 0) -> List[PostResult]:
        """Get posts of any status, newest first"""
        stmt = hydrated(select(Post)).order_by(
            desc(Post.created_at), desc(Post.id)
        ).offset(offset).limit(limit)

        result = await self.db.execute(stmt)
        return [to_result(post) for post in result.scalars().all()]
