from typing import Dict, Iterable, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
import logging

from lostfound.models.user import User
from lostfound.exceptions import UserNotFoundError

logger = logging.getLogger(__name__)

class UserService:
    """Read access to the identity records the auth service owns"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def user_exists(self, user_id: int) -> bool:
        stmt = select(func.count(User.id)).where(User.id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one() > 0

    async def get_users_by_ids(self, user_ids: Iterable[int]) -> Dict[int, User]:
        ids = set(user_ids)
        if not ids:
            return {}
        stmt = select(User).where(User.id.in_(ids))
        result = await self.db.execute(stmt)
        return {user.id: user for user in result.scalars().all()}

    async def require_users(self, *user_ids: int) -> List[User]:
        """Load every id or raise ``UserNotFoundError`` listing all missing ones"""
        found = await self.get_users_by_ids(user_ids)
        missing = [user_id for user_id in user_ids if user_id not in found]
        if missing:
            raise UserNotFoundError(missing)
        return [found[user_id] for user_id in user_ids]
