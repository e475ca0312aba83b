"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory async database, fake providers and a small-budget
    pipeline configuration
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from knowledge_core.boundary.db.base import Base
from knowledge_core.configs import PipelineConfig
from tests.fakes import TEST_MODEL, FakeEmbeddingProvider, FakeLanguageModelProvider


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
async def test_engine():
    """In-memory SQLite engine with all tables created."""
    # Register every model on the metadata
    import knowledge_core.boundary.db.models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_async_db(test_engine):
    """
    Create in-memory SQLite async database session for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )
    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def pipeline_config() -> PipelineConfig:
    """Small budgets so short texts exercise batching and chunking paths."""
    return PipelineConfig(
        min_chunk_tokens=1,
        target_chunk_tokens=8,
        max_chunk_tokens=50,
        embedding_model=TEST_MODEL,
        embedding_batch_size=2,
        embedding_max_concurrency=2,
        top_k=5,
        neighbor_fanout=3,
    )


@pytest.fixture
def embedding_provider() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def llm_provider() -> FakeLanguageModelProvider:
    return FakeLanguageModelProvider()


@pytest.fixture
def pipeline(pipeline_config, embedding_provider, llm_provider):
    """Ingestion pipeline wired to the fake providers."""
    from knowledge_core.core.ingestion import IngestionPipeline

    return IngestionPipeline(pipeline_config, embedding_provider, llm_provider)


@pytest.fixture
def retriever(pipeline_config, embedding_provider):
    """Hybrid retriever sharing the fake embedding provider with the pipeline."""
    from knowledge_core.core.retrieval import HybridRetriever

    return HybridRetriever.from_config(embedding_provider, pipeline_config)
