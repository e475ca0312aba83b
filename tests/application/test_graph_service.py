"""
Tests for GraphService read views.
"""

from uuid import uuid4

import pytest

from knowledge_core.application.services.graph_service import GraphService
from knowledge_core.boundary.db.CRUD import chunk_crud, entity_crud, relationship_crud
from knowledge_core.core.exceptions import DocumentNotFoundError, EntityNotFoundError
from knowledge_core.core.ingestion import IngestionPipeline
from tests.fakes import (
    FakeEmbeddingProvider,
    FakeLanguageModelProvider,
    alpha_beta_extraction,
    create_document,
)


@pytest.fixture
async def ingested_document(test_async_db, pipeline_config):
    llm = FakeLanguageModelProvider(extraction=alpha_beta_extraction())
    pipeline = IngestionPipeline(pipeline_config, FakeEmbeddingProvider(), llm)
    document = await create_document(test_async_db, "Alpha is a system. Beta depends on Alpha.")
    await pipeline.process(test_async_db, document)
    return document


class TestGraphService:
    @pytest.mark.asyncio
    async def test_stats(self, test_async_db, ingested_document):
        stats = await GraphService(test_async_db).get_graph_stats()

        assert stats.entity_count == 2
        assert stats.relationship_count == 1
        assert stats.relation_types == {"depends_on": 1}

    @pytest.mark.asyncio
    async def test_stats_on_empty_graph(self, test_async_db):
        stats = await GraphService(test_async_db).get_graph_stats()

        assert (stats.entity_count, stats.relationship_count, stats.relation_types) == (0, 0, {})

    @pytest.mark.asyncio
    async def test_document_graph(self, test_async_db, ingested_document):
        graph = await GraphService(test_async_db).get_document_graph(ingested_document.id)

        assert sorted(entity.name for entity in graph.entities) == ["Alpha", "Beta"]
        assert [edge.render() for edge in graph.edges] == ["Alpha --[depends_on]--> Beta"]

    @pytest.mark.asyncio
    async def test_document_graph_unknown_document(self, test_async_db):
        with pytest.raises(DocumentNotFoundError):
            await GraphService(test_async_db).get_document_graph(uuid4())

    @pytest.mark.asyncio
    async def test_entity_details(self, test_async_db, ingested_document):
        beta = await entity_crud.get_by_name_type(test_async_db, "Beta", "technology")

        details = await GraphService(test_async_db).get_entity_details(beta.id)

        assert details.entity.name == "Beta"
        assert [doc.id for doc in details.documents] == [ingested_document.id]
        assert details.outgoing == []
        assert [edge.source for edge in details.incoming] == ["Alpha"]

    @pytest.mark.asyncio
    async def test_self_loop_listed_once(self, test_async_db):
        loop = await entity_crud.create(test_async_db, name="Loop", type="concept")
        await relationship_crud.create_many(
            test_async_db,
            [{"source_entity_id": loop.id, "target_entity_id": loop.id, "relation_type": "refers_to"}],
        )

        details = await GraphService(test_async_db).get_entity_details(loop.id)

        assert len(details.outgoing) == 1
        assert details.incoming == []

    @pytest.mark.asyncio
    async def test_entity_details_unknown_entity(self, test_async_db):
        with pytest.raises(EntityNotFoundError):
            await GraphService(test_async_db).get_entity_details(uuid4())

    @pytest.mark.asyncio
    async def test_graph_data(self, test_async_db, ingested_document):
        graph = await GraphService(test_async_db).get_graph_data()

        counts = {node.name: node.mention_count for node in graph.nodes}
        assert counts == {"Alpha": 2, "Beta": 1}
        assert [edge.render() for edge in graph.edges] == ["Alpha --[depends_on]--> Beta"]

    @pytest.mark.asyncio
    async def test_graph_data_includes_unmentioned_entities(self, test_async_db):
        await entity_crud.create(test_async_db, name="Orphan", type="concept")

        graph = await GraphService(test_async_db).get_graph_data()

        assert [(node.name, node.mention_count) for node in graph.nodes] == [("Orphan", 0)]
        assert graph.edges == []


class TestEmbeddingStats:
    @pytest.mark.asyncio
    async def test_after_ingestion(self, test_async_db, ingested_document):
        stats = await GraphService(test_async_db).get_embedding_stats()

        assert stats.document_count == 1
        assert stats.chunk_count == 2
        assert (stats.embedded_chunks, stats.pending_chunks) == (2, 0)
        assert stats.unique_content_hashes == 2
        assert stats.duplicate_chunks == 0
        assert stats.cache_entry_count >= 2
        assert stats.avg_chunks_per_document == 2.0
        assert stats.avg_tokens_per_chunk > 0
        assert stats.entity_count == 2
        assert stats.entities_with_embeddings == 2
        assert stats.entities_without_embeddings == 0

    @pytest.mark.asyncio
    async def test_pending_chunks_and_bare_entities(self, test_async_db):
        document = await create_document(test_async_db, "a")
        await chunk_crud.create_many(
            test_async_db,
            document.id,
            [
                {"chunk_index": 0, "content": "a", "content_hash": "h", "token_count": 1},
                {"chunk_index": 1, "content": "a", "content_hash": "h", "token_count": 3},
            ],
        )
        await entity_crud.create(test_async_db, name="Bare", type="concept")

        stats = await GraphService(test_async_db).get_embedding_stats()

        assert (stats.embedded_chunks, stats.pending_chunks) == (0, 2)
        assert stats.unique_content_hashes == 1
        assert stats.duplicate_chunks == 1
        assert stats.avg_tokens_per_chunk == 2.0
        assert stats.entities_with_embeddings == 0
        assert stats.entities_without_embeddings == 1

    @pytest.mark.asyncio
    async def test_empty_knowledge_base(self, test_async_db):
        stats = await GraphService(test_async_db).get_embedding_stats()

        assert stats.document_count == 0
        assert stats.chunk_count == 0
        assert stats.avg_chunks_per_document == 0.0
        assert stats.avg_tokens_per_chunk == 0.0
