import uuid
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from vidshare.core.config import DatabaseSettings

Base = declarative_base()

_engine = None
_AsyncSessionLocal = None

def get_engine():
    global _engine
    if _engine is None:
        db_settings = DatabaseSettings()
        _engine = create_async_engine(
            db_settings.database_url,
            future=True,
            echo=db_settings.debug_sql,
            poolclass=NullPool,
        )
    return _engine

def get_async_sessionmaker():
    global _AsyncSessionLocal
    if _AsyncSessionLocal is None:
        _AsyncSessionLocal = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _AsyncSessionLocal

async def init_models(engine=None):
    import vidshare.models  # noqa: F401

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

async def get_db() -> AsyncSession:
    async with get_async_sessionmaker()() as session:
        yield session

def generate_id() -> str:
    return uuid.uuid4().hex

def utcnow() -> datetime:
    return datetime.now(timezone.utc)
