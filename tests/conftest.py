"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import enorett.models  # noqa: F401  # registers tables on Base.metadata
from enorett.database import Base
from enorett.main import app
from enorett.routes.lookup import (
    get_entitlement_check,
    get_orchestrator,
    get_session_factory,
)
from enorett.services.dictionary.base import Article, DictionaryEntry
from enorett.services.dictionary.pronunciation import PronunciationIndex
from enorett.services.dictionary.tiered import TieredDictionary
from enorett.services.entitlement import StaticEntitlement
from enorett.services.lookup import LookupOrchestrator

FREE_LIMIT = 4


class FakeClock:
    """Manually advanced time source for TTL caches."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def async_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def async_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with async_session_maker() as session:
        yield session


@pytest.fixture
def dictionary_entries() -> list[DictionaryEntry]:
    """Four free-tier words followed by premium-only words."""
    return [
        DictionaryEntry(word="bil", article=Article.EN, translation="car"),
        DictionaryEntry(word="hus", article=Article.ETT, translation="house"),
        DictionaryEntry(word="bok", article=Article.EN, translation="book"),
        DictionaryEntry(word="barn", article=Article.ETT, translation=None),
        DictionaryEntry(word="obscureproword", article=Article.ETT, translation="rare word"),
        DictionaryEntry(word="fönster", article=Article.ETT, translation="window"),
    ]


@pytest.fixture
def dictionary(dictionary_entries: list[DictionaryEntry]) -> TieredDictionary:
    return TieredDictionary(entries=dictionary_entries, free_limit=FREE_LIMIT)


@pytest.fixture
def pronunciations() -> PronunciationIndex:
    return PronunciationIndex(
        entries={
            "bil": "biːl",
            "fönster": "ˈfœnstɛr",
            "ordbok": "ˈuːɖbuːk",
        }
    )


@pytest.fixture
def morphology_client() -> MagicMock:
    """Sparv client stub returning no data."""
    client = MagicMock()
    client.fetch_genus = AsyncMock(return_value=None)
    return client


@pytest.fixture
def corpus_client() -> MagicMock:
    """Korp client stub returning no data."""
    client = MagicMock()
    client.fetch_examples = AsyncMock(return_value=None)
    return client


@pytest.fixture
def orchestrator(
    dictionary: TieredDictionary,
    pronunciations: PronunciationIndex,
    morphology_client: MagicMock,
    corpus_client: MagicMock,
) -> LookupOrchestrator:
    return LookupOrchestrator(
        dictionary=dictionary,
        pronunciations=pronunciations,
        morphology=morphology_client,
        corpus=corpus_client,
    )


@pytest.fixture
def test_app(orchestrator: LookupOrchestrator, async_session: AsyncSession) -> FastAPI:
    """Create a test FastAPI application backed by the stub orchestrator."""

    @asynccontextmanager
    async def shared_session() -> AsyncIterator[AsyncSession]:
        yield async_session

    app.dependency_overrides[get_session_factory] = lambda: shared_session
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an asynchronous test client."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def entitle_everyone(test_app: FastAPI) -> None:
    """Treat every caller with a user id as entitled."""
    test_app.dependency_overrides[get_entitlement_check] = lambda: StaticEntitlement(True)
