import os

# Must be set before lostfound.config is imported anywhere
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from datetime import timedelta
from typing import AsyncGenerator, List
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from lostfound.main import app
from lostfound.db.session import get_db
from lostfound.models import Base, User, Post, PostImage
from lostfound.models.base import utcnow
from lostfound.models.enums import PostType, PostCategory, PostStatus
from lostfound.services.auth_service import create_access_token
from lostfound.services.notifier import get_notifier

# Test database URL - in-memory SQLite
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

BEIRUT = (33.8938, 35.5018)
TRIPOLI = (34.4361, 35.8497)

class RecordingNotifier:
    def __init__(self):
        self.sent = []

    async def message_created(self, message, recipient_id):
        self.sent.append((message.id, recipient_id))

@pytest.fixture
async def engine():
    """Fresh in-memory database per test"""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()

@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

@pytest.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session"""
    async with session_factory() as session:
        yield session

@pytest.fixture
def notifier():
    return RecordingNotifier()

@pytest.fixture
async def test_client(session_factory, notifier) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app with the test database"""
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()

def auth_headers(user_id: int) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}

async def make_user(db: AsyncSession, first_name: str, last_name: str = "Test") -> User:
    user = User(
        email=f"{first_name.lower()}.{last_name.lower()}@example.com",
        first_name=first_name,
        last_name=last_name,
        phone="+961 1 234 567",
    )
    db.add(user)
    await db.commit()
    return user

async def make_post(
    db: AsyncSession,
    owner: User,
    title: str = "Lost wallet",
    description: str = "Brown leather wallet",
    type: PostType = PostType.LOST,
    category: PostCategory = PostCategory.OTHER,
    location_text: str = None,
    coordinates: tuple = None,
    status: PostStatus = PostStatus.ACTIVE,
    age_minutes: int = 0,
    images: List[dict] = None,
) -> Post:
    """Insert a post directly; ``age_minutes`` pushes created_at into the past"""
    created = utcnow() - timedelta(minutes=age_minutes)
    post = Post(
        user_id=owner.id,
        title=title,
        description=description,
        type=type,
        category=category,
        location_text=location_text,
        latitude=coordinates[0] if coordinates else None,
        longitude=coordinates[1] if coordinates else None,
        contact_info="call 70 000 000",
        status=status,
        created_at=created,
        updated_at=created,
    )
    post.images = [PostImage(**image) for image in (images or [])]
    db.add(post)
    await db.commit()
    return post

@pytest.fixture
async def alice(test_db):
    return await make_user(test_db, "Alice", "Haddad")

@pytest.fixture
async def bob(test_db):
    return await make_user(test_db, "Bob", "Khoury")

@pytest.fixture
async def carol(test_db):
    return await make_user(test_db, "Carol", "Nassar")

@pytest.fixture
async def lost_phone(test_db, alice):
    return await make_post(
        test_db,
        alice,
        title="Lost iPhone 13",
        description="Black iPhone with a cracked case",
        category=PostCategory.ELECTRONICS,
        location_text="Hamra Street, Beirut",
        coordinates=BEIRUT,
    )

@pytest.fixture
def post_factory(test_db):
    async def factory(owner: User, **kwargs) -> Post:
        return await make_post(test_db, owner, **kwargs)
    return factory

@pytest.fixture
def user_factory(test_db):
    async def factory(first_name: str, last_name: str = "Test") -> User:
        return await make_user(test_db, first_name, last_name)
    return factory

@pytest.fixture
def headers_for():
    return auth_headers
