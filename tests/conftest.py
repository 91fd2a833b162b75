import os

# Point the app at a throwaway database before anything imports it
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.core import database
from app.main import app


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def client(db_url):
    """
    TestClient bound to a fresh SQLite file; the app lifespan creates the tables.
    """
    database.configure_database(db_url)
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def db_session(db_url):
    """
    AsyncSession on a fresh SQLite file. Code under test that opens its own
    sessions (SSE generators, assistant tools) sees the same database.
    """
    engine = database.configure_database(db_url)
    await database.init_db()
    async with database.get_sessionmaker()() as session:
        yield session
    await engine.dispose()
