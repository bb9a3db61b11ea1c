import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from infrastructure.db.database import init_models, make_session_factory
from infrastructure.db.repositories.decision_store_sqlalchemy import DecisionStoreSqlalchemy


@pytest_asyncio.fixture
async def sqlite_engine(tmp_path):
    """Fresh on-disk SQLite database with the decisions table created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'explore.db'}")
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine):
    return make_session_factory(sqlite_engine)


@pytest.fixture
def decision_store(session_factory):
    return DecisionStoreSqlalchemy(session_factory)
