"""Pytest configuration and fixtures."""

import os
import tempfile

# Settings are read once at import time; point the app at a throwaway database
_TMP_DIR = tempfile.mkdtemp(prefix="supportdesk-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/app.sqlite"
os.environ["SEED_DATA"] = "false"

from typing import Any, AsyncGenerator, Dict, List

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import NullPool

from supportdesk.core.websockets import get_broadcaster
from supportdesk.db.engine import (
    build_engine,
    build_session_maker,
    create_db_and_tables,
    get_session,
)
from supportdesk.main import app
from supportdesk.services.agent_service import AgentService
from supportdesk.services.ticket_service import TicketService


class RecordingBroadcaster:
    """Stands in for the WebSocket manager and keeps every published snapshot."""

    def __init__(self):
        self.events: List[Dict[str, Any]] = []
        self.active_connections: List[Any] = []

    async def publish_ticket(self, snapshot: Dict[str, Any]):
        self.events.append(snapshot)


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'tickets.sqlite'}"


@pytest_asyncio.fixture
async def engine(database_url):
    # NullPool: no connection outlives the event loop that opened it
    test_engine = build_engine(database_url, poolclass=NullPool)
    await create_db_and_tables(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_maker(engine):
    return build_session_maker(engine)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as db_session:
        yield db_session


@pytest.fixture
def broadcaster() -> RecordingBroadcaster:
    return RecordingBroadcaster()


@pytest.fixture
def ticket_service(session, broadcaster) -> TicketService:
    return TicketService(session, broadcaster)


@pytest.fixture
def agent_service(session) -> AgentService:
    return AgentService(session)


@pytest_asyncio.fixture
async def agent(agent_service):
    return await agent_service.create_agent("Alice Agent", "alice@example.com")


@pytest_asyncio.fixture
async def api_client(session_maker, broadcaster) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the app, with DB and broadcaster overridden."""

    async def override_session():
        async with session_maker() as db_session:
            yield db_session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_broadcaster] = lambda: broadcaster
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
