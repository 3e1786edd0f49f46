"""
Test configuration and fixtures
"""

import os
import tempfile
from pathlib import Path

os.environ.setdefault("APP_NAME", "vidshare-test")
os.environ.setdefault("APP_PORT", "8000")
os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789abcdefghijkl")
os.environ.setdefault("ACCESS_TOKEN_EXPIRE_MINUTES", "30")
os.environ.setdefault("LOG_FILE", str(Path(tempfile.gettempdir()) / "vidshare-tests.log"))

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from vidshare.main import app
from vidshare.db.database import get_db, init_models
from vidshare.models.users import Users
from vidshare.models.videos import Video
from vidshare.utils.security import jwt_settings


TEST_DATABASE_URL = "sqlite+aiosqlite://"


def create_access_token(data: dict) -> str:
    """Mint an access token the way get_current_user expects it"""
    expire = datetime.now(timezone.utc) + timedelta(minutes=jwt_settings.access_token_expire_minutes)
    payload = dict(data)
    payload.update({"exp": expire, "type": "access"})
    return jwt.encode(payload, jwt_settings.secret_key, algorithm=jwt_settings.algorithm)


@pytest.fixture
async def test_engine():
    """Create an in-memory database engine with all tables"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    await init_models(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
async def test_db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session"""
    async_session = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )

    async with async_session() as session:
        yield session


@pytest.fixture
async def client(test_db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database dependency override"""

    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(test_db: AsyncSession):
    """Factory creating users"""

    async def _make_user(name: str, **fields) -> Users:
        user = Users(name=name, email=f"{name}@example.com", handle=name, **fields)
        test_db.add(user)
        await test_db.commit()
        await test_db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_video(test_db: AsyncSession):
    """Factory creating videos, published by default"""

    async def _make_video(owner: Users, title: str = "A video", publish: bool = True, **fields) -> Video:
        fields.setdefault("thumbnail_url", f"https://cdn.example.com/{title.replace(' ', '-')}.jpg")
        fields.setdefault("video_url", f"https://cdn.example.com/{title.replace(' ', '-')}.mp4")
        video = Video(user_id=owner.id, title=title, publish=publish, **fields)
        test_db.add(video)
        await test_db.commit()
        await test_db.refresh(video)
        return video

    return _make_video


@pytest.fixture
async def owner(make_user) -> Users:
    return await make_user("owner")


@pytest.fixture
async def viewer(make_user) -> Users:
    return await make_user("viewer")


@pytest.fixture
async def video(make_video, owner: Users) -> Video:
    return await make_video(owner, title="First upload", description="Hello world")


@pytest.fixture
def auth_headers():
    """Build authorization headers for a user"""

    async def _auth_headers(user: Users) -> dict:
        token = create_access_token({"id": user.id})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def commit_concurrently(test_db: AsyncSession, monkeypatch):
    """Commit a competing row right after the first SELECT on a table,
    between a service's existence check and its own insert"""

    def _install(table, make_row):
        execute = test_db.execute
        pending = [make_row]

        async def execute_then_commit(statement, *args, **kwargs):
            result = await execute(statement, *args, **kwargs)
            if pending and getattr(statement, "is_select", False) and any(
                from_ is table for from_ in statement.get_final_froms()
            ):
                test_db.add(pending.pop()())
                await test_db.commit()
            return result

        monkeypatch.setattr(test_db, "execute", execute_then_commit)

    return _install
