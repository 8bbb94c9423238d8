import logging
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from .config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

_db_url = settings.database_url

# SQLite pools do not take sizing arguments
_engine_kwargs = {"echo": settings.debug}
if not _db_url.startswith("sqlite"):
    _engine_kwargs.update(pool_size=10, max_overflow=20)

try:
    async_engine = create_async_engine(_db_url, **_engine_kwargs)

    AsyncSessionLocal = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
except Exception as e:
    logger.warning(f"Could not create database engine for {_db_url}: {e}")
    async_engine = None
    AsyncSessionLocal = None

Base = declarative_base()


async def init_db():
    """Initialize database tables."""
    if async_engine is None:
        return
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
