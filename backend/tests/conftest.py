"""
Pytest configuration and shared fixtures for InnerCompass tests.

This module provides:
- Async database fixtures (in-memory SQLite)
- Mock language-model clients (OpenAI-compatible, Anthropic)
- A scripted fake coach that counts its calls
- Fully wired engine, controller and API client fixtures
"""

import asyncio
import os

# Must be set before innercompass.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LLM_API_KEY", "test-key-for-testing")
os.environ.setdefault("ANTHROPIC_API_KEY", "test-key-for-testing")

from collections.abc import AsyncGenerator
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from innercompass.content import CATALOG
from innercompass.content.catalog import Topic
from innercompass.models.base import Base
from innercompass.models.conversation import Message
from innercompass.models.user import User
from innercompass.services.coach_client import CoachClient, CoachResult
from innercompass.services.conversation_engine import ConversationEngine
from innercompass.services.document_store import DocumentStore
from innercompass.services.identity import IdentityProvider, hash_password
from innercompass.services.progress_store import ProgressStore
from innercompass.services.report_aggregator import ReportAggregator
from innercompass.services.session import SessionController


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def async_engine():
    """Create an async engine with in-memory SQLite for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
def db_session_factory(async_engine):
    """Session factory bound to the in-memory engine."""
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture(scope="function")
async def db(db_session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A session for tests that inspect rows directly."""
    async with db_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def test_user(db_session_factory) -> User:
    """A registered user with no progress."""
    async with db_session_factory() as session:
        user = User(
            email="xiaoming@example.com",
            display_name="小明",
            password_hash=hash_password("secret123"),
        )
        session.add(user)
        await session.commit()
        return user


# =============================================================================
# Mock API Clients
# =============================================================================

@pytest.fixture
def mock_openai_client():
    """Mock OpenAI-compatible client returning a fixed completion."""
    mock_client = AsyncMock()

    mock_chat_response = MagicMock()
    mock_chat_response.choices = [
        MagicMock(message=MagicMock(content="1️⃣ **洞察**\n• 你很重视自由"))
    ]
    mock_client.chat.completions.create = AsyncMock(return_value=mock_chat_response)

    return mock_client


@pytest.fixture
def mock_anthropic_client():
    """Mock Anthropic client for testing."""
    mock_client = AsyncMock()

    mock_response = MagicMock()
    mock_response.content = [MagicMock(text="Mock response")]
    mock_client.messages.create = AsyncMock(return_value=mock_response)

    return mock_client


class FakeCoachClient(CoachClient):
    """Coach that never touches the network and records every call."""

    def __init__(self) -> None:
        super().__init__(client=MagicMock())
        self.calls: list[tuple[str, Any]] = []
        self.fail = False

    def _result(self, kind: str, payload: Any) -> CoachResult:
        self.calls.append((kind, payload))
        if self.fail:
            return CoachResult.failure("simulated timeout")
        return CoachResult.success(f"{kind} #{len(self.calls)}")

    async def turn_response(self, topic: Topic, history: list[Message], user_display_name: str) -> CoachResult:
        return self._result("turn", list(history))

    async def topic_summary(self, topic: Topic, history: list[Message], user_summary: str) -> CoachResult:
        return self._result("summary", (list(history), user_summary))

    async def holistic_report(self, completed_data: dict[str, dict[str, Any]]) -> CoachResult:
        return self._result("report", dict(completed_data))

    def count(self, kind: str) -> int:
        return sum(1 for k, _ in self.calls if k == kind)


@pytest.fixture
def fake_coach() -> FakeCoachClient:
    return FakeCoachClient()


@pytest.fixture
def coach_gate(fake_coach, monkeypatch) -> asyncio.Event:
    """Hold every coach turn until the returned event is set."""
    gate = asyncio.Event()
    original = fake_coach.turn_response

    async def gated_turn(topic, history, user_display_name):
        await gate.wait()
        return await original(topic, history, user_display_name)

    monkeypatch.setattr(fake_coach, "turn_response", gated_turn)
    return gate


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def fixed_clock():
    """Clock that always returns the same instant."""
    instant = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
    return lambda: instant


@pytest.fixture
def document_store(db_session_factory) -> DocumentStore:
    return DocumentStore(db_session_factory)


@pytest.fixture
def progress_store(document_store) -> ProgressStore:
    return ProgressStore(document_store)


@pytest.fixture
def engine(fake_coach) -> ConversationEngine:
    return ConversationEngine(fake_coach)


@pytest.fixture
def controller(db_session_factory, document_store, engine, fake_coach) -> SessionController:
    return SessionController(
        catalog=CATALOG,
        engine=engine,
        document_store=document_store,
        identity_provider=IdentityProvider(db_session_factory),
        aggregator=ReportAggregator(CATALOG, fake_coach, cache_enabled=False),
    )


@pytest.fixture
async def api_client(controller) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with the test controller wired in."""
    from innercompass.main import app
    from innercompass.routers.deps import get_controller

    app.dependency_overrides[get_controller] = lambda: controller
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# =============================================================================
# Catalog Fixtures
# =============================================================================

@pytest.fixture
def values_module():
    return CATALOG.get_module("values")


@pytest.fixture
def talents_module():
    return CATALOG.get_module("talents")
