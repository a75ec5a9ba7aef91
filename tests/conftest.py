"""
Pytest configuration and fixtures for tests.
Provides an in-memory database, profiles, auth headers, a recording push
gateway and an HTTP client wired to all of them.
"""
import json
import os

# Must be set before anything imports app.config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["REDIS_URL"] = ""
os.environ["WEBHOOK_SECRET"] = ""

from typing import AsyncGenerator, Callable, Dict, List, Optional, Set

import httpx
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core import database
from app.core.database import get_db
from app.core.push_gateway import PushGatewayClient
from app.core.rate_limit import limiter
from app.core.security import create_access_token
from app.dependencies import get_push_gateway
from app.main import app
from app.models import Base, Profile
from app.models.base import generate_uuid
from app.services.conversation_service import ConversationService
from app.services.friendship_service import FriendshipService


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def test_engine():
    """Create test database engine (one in-memory database per test)."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine) -> async_sessionmaker:
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def make_profile(db_session: AsyncSession) -> Callable:
    """Factory creating committed profiles."""
    async def _make(display_name: Optional[str] = None) -> Profile:
        profile = Profile(id=generate_uuid(), display_name=display_name)
        db_session.add(profile)
        await db_session.commit()
        return profile
    return _make


@pytest.fixture
async def alice(make_profile) -> Profile:
    return await make_profile("Alice")


@pytest.fixture
async def bob(make_profile) -> Profile:
    return await make_profile("Bob")


@pytest.fixture
async def carol(make_profile) -> Profile:
    return await make_profile("Carol")


@pytest.fixture
async def make_friends(db_session: AsyncSession) -> Callable:
    """Factory creating an accepted friendship."""
    async def _make(requester: Profile, addressee: Profile):
        service = FriendshipService(db_session)
        friendship = await service.send_friend_request(requester.id, addressee.id)
        friendship = await service.accept_friend_request(friendship.id, addressee.id)
        await db_session.commit()
        return friendship
    return _make


@pytest.fixture
async def conversation_id(db_session: AsyncSession, alice, bob) -> str:
    """Conversation between alice and bob."""
    conversation_id = await ConversationService(db_session).get_or_create_conversation(
        alice.id, bob.id
    )
    await db_session.commit()
    return conversation_id


@pytest.fixture
def auth_headers_for() -> Callable[[Profile], Dict[str, str]]:
    """Bearer headers for a profile."""
    def _headers(profile: Profile) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(profile.id)}"}
    return _headers


class GatewayRecorder:
    """
    Stand-in for the push gateway behind httpx.MockTransport.

    Records every batch it receives. Tokens listed in error_tokens get an
    error ticket; down=True makes every request fail to connect.
    """

    def __init__(self):
        self.batches: List[List[dict]] = []
        self.error_tokens: Set[str] = set()
        self.down = False
        self.status_code = 200

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.down:
            raise httpx.ConnectError("gateway unreachable", request=request)

        batch = json.loads(request.content)
        self.batches.append(batch)

        tickets = []
        for index, message in enumerate(batch):
            if message["to"] in self.error_tokens:
                tickets.append({
                    "status": "error",
                    "message": "DeviceNotRegistered",
                    "details": {"error": "DeviceNotRegistered"},
                })
            else:
                tickets.append({"status": "ok", "id": f"ticket-{index}"})

        return httpx.Response(self.status_code, json={"data": tickets})

    def client(self) -> PushGatewayClient:
        return PushGatewayClient(
            url="https://push.test/--/api/v2/push/send",
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture
def gateway() -> GatewayRecorder:
    return GatewayRecorder()


@pytest.fixture(scope="function")
async def client(session_factory, gateway, monkeypatch) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client with dependency overrides."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_push_gateway] = gateway.client

    # Background tasks open their own sessions
    monkeypatch.setattr(database, "AsyncSessionLocal", session_factory)
    limiter.reset()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
