"""Database sessions for Celery workers."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from sacredsix.core.config import settings


def get_async_session() -> AsyncSession:
    """Create an async database session for Celery tasks.

    Returns:
        Async database session
    """
    engine = create_async_engine(settings.database_url, pool_pre_ping=True)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    return session_maker()
