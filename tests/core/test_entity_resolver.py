"""
Unit tests for entity resolution and graph upsert.
"""

import pytest
from sqlalchemy import select

from knowledge_core.boundary.db.CRUD import chunk_crud, entity_crud, relationship_crud
from knowledge_core.boundary.db.models import EmbeddingStatus, EntityMentionModel
from knowledge_core.core.embedding import EmbeddingOrchestrator
from knowledge_core.core.graph import EntityResolver, entity_embedding_text
from knowledge_core.models import ExtractionResult
from tests.fakes import (
    TEST_MODEL,
    FakeEmbeddingProvider,
    alpha_beta_extraction,
    create_document,
    hashed_vector,
)


async def _document_with_chunks(session, texts: list[str]):
    document = await create_document(session, "\n\n".join(texts))
    rows = [
        {
            "chunk_index": i,
            "content": text,
            "content_hash": f"hash-{i}",
            "token_count": 1,
            "embedding": None,
            "embedding_status": EmbeddingStatus.PENDING,
        }
        for i, text in enumerate(texts)
    ]
    chunks = await chunk_crud.create_many(session, document.id, rows)
    return document, chunks


@pytest.fixture
def provider() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def resolver(provider) -> EntityResolver:
    return EntityResolver(EmbeddingOrchestrator(provider))


class TestEntityEmbeddingText:
    def test_with_description(self):
        assert entity_embedding_text("Alpha", "First system") == "Alpha: First system"

    def test_without_description(self):
        assert entity_embedding_text("Alpha", None) == "Alpha"


class TestEntityResolver:
    @pytest.mark.asyncio
    async def test_creates_entities_mentions_and_edges(self, test_async_db, resolver, provider):
        document, chunks = await _document_with_chunks(
            test_async_db, ["Alpha is fast.", "Beta relies on alpha."]
        )

        result = await resolver.upsert(
            test_async_db, document.id, alpha_beta_extraction(), chunks, TEST_MODEL
        )

        assert result.entities_created == 2
        assert result.entities_reused == 0
        assert result.relationships_created == 1
        assert result.relationships_dropped == 0
        assert set(result.entity_ids) == {"Alpha", "Beta"}
        # Alpha appears in both chunks (case-insensitive), Beta in the second
        assert result.mentions_created == 3

        alpha = await entity_crud.get_by_name_type(test_async_db, "Alpha", "technology")
        assert alpha.description == "First system"
        assert alpha.embedding == hashed_vector("Alpha: First system")
        assert "Alpha: First system" in provider.embedded_texts

        edges = await relationship_crud.get_edges_touching(test_async_db, alpha.id)
        assert len(edges) == 1
        assert edges[0].relation_type == "depends_on"
        assert edges[0].weight == 1.0
        assert edges[0].source_document_id == document.id

    @pytest.mark.asyncio
    async def test_existing_entities_are_reused(self, test_async_db, resolver, provider):
        document, chunks = await _document_with_chunks(test_async_db, ["Alpha and Beta."])
        await resolver.upsert(test_async_db, document.id, alpha_beta_extraction(), chunks, TEST_MODEL)
        provider.calls.clear()

        other, other_chunks = await _document_with_chunks(test_async_db, ["Alpha again."])
        result = await resolver.upsert(
            test_async_db,
            other.id,
            ExtractionResult(entities=[{"name": "Alpha", "type": "technology"}]),
            other_chunks,
            TEST_MODEL,
        )

        assert result.entities_reused == 1
        assert result.entities_created == 0
        assert provider.calls == []
        assert await entity_crud.count(test_async_db) == 2

    @pytest.mark.asyncio
    async def test_same_name_different_type_are_distinct(self, test_async_db, resolver):
        document, chunks = await _document_with_chunks(test_async_db, ["Python everywhere."])
        extraction = ExtractionResult(
            entities=[
                {"name": "Python", "type": "technology"},
                {"name": "Python", "type": "concept"},
            ]
        )

        result = await resolver.upsert(test_async_db, document.id, extraction, chunks, TEST_MODEL)

        assert result.entities_created == 2
        technology = await entity_crud.get_by_name_type(test_async_db, "Python", "technology")
        assert result.entity_ids["Python"] == technology.id

    @pytest.mark.asyncio
    async def test_duplicate_entities_merge_descriptions(self, test_async_db, resolver):
        document, chunks = await _document_with_chunks(test_async_db, ["Gamma."])
        extraction = ExtractionResult(
            entities=[
                {"name": "Gamma", "type": "concept"},
                {"name": "Gamma", "type": "concept", "description": "A letter"},
            ]
        )

        result = await resolver.upsert(test_async_db, document.id, extraction, chunks, TEST_MODEL)

        assert result.entities_created == 1
        gamma = await entity_crud.get_by_name_type(test_async_db, "Gamma", "concept")
        assert gamma.description == "A letter"

    @pytest.mark.asyncio
    async def test_unmentioned_entity_links_to_first_chunk(self, test_async_db, resolver):
        document, chunks = await _document_with_chunks(test_async_db, ["First.", "Second."])
        extraction = ExtractionResult(entities=[{"name": "Delta", "type": "concept"}])

        await resolver.upsert(test_async_db, document.id, extraction, chunks, TEST_MODEL)

        delta = await entity_crud.get_by_name_type(test_async_db, "Delta", "concept")
        rows = (
            await test_async_db.execute(
                select(EntityMentionModel).where(EntityMentionModel.entity_id == delta.id)
            )
        ).scalars().all()
        assert [row.chunk_id for row in rows] == [chunks[0].id]

    @pytest.mark.asyncio
    async def test_unresolved_relationships_are_dropped(self, test_async_db, resolver):
        document, chunks = await _document_with_chunks(test_async_db, ["Alpha only."])
        extraction = ExtractionResult(
            entities=[{"name": "Alpha", "type": "technology"}],
            relationships=[
                {"source": "Alpha", "target": "Nowhere", "type": "uses"},
                {"source": "alpha", "target": "ALPHA", "type": "refers_to"},
            ],
        )

        result = await resolver.upsert(test_async_db, document.id, extraction, chunks, TEST_MODEL)

        assert result.relationships_dropped == 1
        # Endpoints fall back to case-insensitive name matching
        assert result.relationships_created == 1

    @pytest.mark.asyncio
    async def test_duplicate_edges_are_collapsed(self, test_async_db, resolver):
        document, chunks = await _document_with_chunks(test_async_db, ["Alpha Beta."])
        extraction = alpha_beta_extraction()
        extraction.relationships.append(extraction.relationships[0].model_copy())

        result = await resolver.upsert(test_async_db, document.id, extraction, chunks, TEST_MODEL)

        assert result.relationships_created == 1

    @pytest.mark.asyncio
    async def test_empty_extraction(self, test_async_db, resolver, provider):
        document, chunks = await _document_with_chunks(test_async_db, ["Nothing here."])

        result = await resolver.upsert(
            test_async_db, document.id, ExtractionResult.empty(), chunks, TEST_MODEL
        )

        assert result.entities_created == 0
        assert result.mentions_created == 0
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_entity_embedding_failure_still_creates_entity(self, test_async_db):
        provider = FakeEmbeddingProvider(fail_when=lambda batch: True)
        resolver = EntityResolver(EmbeddingOrchestrator(provider))
        document, chunks = await _document_with_chunks(test_async_db, ["Alpha."])

        result = await resolver.upsert(
            test_async_db,
            document.id,
            ExtractionResult(entities=[{"name": "Alpha", "type": "technology"}]),
            chunks,
            TEST_MODEL,
        )

        assert result.entities_created == 1
        assert result.entities_without_embedding == 1
        alpha = await entity_crud.get_by_name_type(test_async_db, "Alpha", "technology")
        assert alpha.embedding is None
