import sys
import pytest
from pathlib import Path

# Add project root (2 levels up from tests/) to sys.path so tests can import 'videocalls'
root = Path(__file__).resolve().parents[1]
if str(root) not in sys.path:
    sys.path.insert(0, str(root))


# Optionally set PYTHONPATH for runtime
import os
os.environ.setdefault('PYTHONPATH', str(root))


from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from videocalls.models.database import Base as DBBase, get_db
from videocalls.api.deps import get_room_provider, get_notifier
from tests.helpers import FakeRoomProvider, RecordingNotifier, seed_workspace


@pytest.fixture
async def session_factory():
    """Fresh in-memory SQLite database per test.

    StaticPool keeps the single connection alive so every session sees the
    same in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(DBBase.metadata.create_all)

    yield sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def provider():
    return FakeRoomProvider()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
async def ws(db):
    """Client, freelancer, an outsider and the workspace pairing the first two."""
    return await seed_workspace(db)


@pytest.fixture
async def api_client(session_factory, provider, notifier):
    """HTTP client against the app with the database and collaborators swapped."""
    async def _get_test_db():
        async with session_factory() as session:
            yield session

    from videocalls.main import app as _app
    _app.dependency_overrides[get_db] = _get_test_db
    _app.dependency_overrides[get_room_provider] = lambda: provider
    _app.dependency_overrides[get_notifier] = lambda: notifier

    async with AsyncClient(transport=ASGITransport(app=_app), base_url="http://test") as client:
        yield client

    _app.dependency_overrides.clear()
