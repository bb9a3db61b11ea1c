"""
Database configuration and session management for async SQLAlchemy.
"""
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker

from domain.config import get_database_config

# Import all models to ensure they're registered in the same registry
# This must happen before creating the tables
from infrastructure.db.models import Base, DecisionModel  # noqa: F401

DATABASE_URL = get_database_config().url

# Create async engine
engine = create_async_engine(
    DATABASE_URL,
    echo=False,  # Set to True for SQL query logging
    future=True,
)


def make_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


# Create async session factory
AsyncSessionLocal = make_session_factory(engine)


async def init_models(bind: AsyncEngine = engine) -> None:
    """Create the decisions table (and its index) if it does not exist yet."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
