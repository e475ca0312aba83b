"""
Unit tests for batched, throttled embedding orchestration.
"""

import pytest

from knowledge_core.boundary.db.models import EmbeddingPurpose
from knowledge_core.configs import PipelineConfig
from knowledge_core.core.embedding import EmbeddingOrchestrator
from knowledge_core.core.exceptions import EmbeddingError
from knowledge_core.models import StageStatus
from tests.fakes import FakeEmbeddingProvider, hashed_vector

MODEL = "orchestrator-test-model"


class TestEmbeddingOrchestrator:
    @pytest.mark.asyncio
    async def test_batches_preserve_input_order(self, test_async_db):
        provider = FakeEmbeddingProvider()
        orchestrator = EmbeddingOrchestrator(provider, batch_size=2, max_concurrency=2)
        texts = [f"text {i}" for i in range(5)]

        result = await orchestrator.embed(test_async_db, texts, MODEL, EmbeddingPurpose.RETRIEVAL)

        assert result.vectors == [hashed_vector(t) for t in texts]
        assert [len(call) for call in provider.calls] == [2, 2, 1]
        assert result.batches == 3
        assert result.failed_batches == 0
        assert result.status == StageStatus.SUCCESS

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self, test_async_db):
        provider = FakeEmbeddingProvider(delay=0.01)
        orchestrator = EmbeddingOrchestrator(provider, batch_size=1, max_concurrency=2)

        await orchestrator.embed(
            test_async_db, [f"t{i}" for i in range(6)], MODEL, EmbeddingPurpose.RETRIEVAL
        )

        assert len(provider.calls) == 6
        assert 1 <= provider.max_in_flight <= 2

    @pytest.mark.asyncio
    async def test_failed_batch_yields_partial_result(self, test_async_db):
        provider = FakeEmbeddingProvider(fail_when=lambda batch: "bad" in batch)
        orchestrator = EmbeddingOrchestrator(provider, batch_size=2, max_concurrency=2)

        result = await orchestrator.embed(
            test_async_db, ["ok1", "ok2", "bad", "ok3"], MODEL, EmbeddingPurpose.RETRIEVAL
        )

        assert result.vectors[0] == hashed_vector("ok1")
        assert result.vectors[1] == hashed_vector("ok2")
        assert result.vectors[2] is None
        assert result.vectors[3] is None
        assert result.failed_batches == 1
        assert result.missing_count == 2
        assert result.status == StageStatus.PARTIAL

    @pytest.mark.asyncio
    async def test_failed_inputs_are_recomputed_later(self, test_async_db):
        provider = FakeEmbeddingProvider(fail_when=lambda batch: "bad" in batch)
        orchestrator = EmbeddingOrchestrator(provider, batch_size=2)
        await orchestrator.embed(test_async_db, ["ok1", "bad"], MODEL, EmbeddingPurpose.RETRIEVAL)

        provider.fail_when = None
        provider.calls.clear()
        result = await orchestrator.embed(test_async_db, ["ok1", "bad"], MODEL, EmbeddingPurpose.RETRIEVAL)

        assert provider.calls == [["bad"]]
        assert result.vectors == [hashed_vector("ok1"), hashed_vector("bad")]
        assert result.hits == 1

    @pytest.mark.asyncio
    async def test_strict_mode_raises(self, test_async_db):
        provider = FakeEmbeddingProvider(fail_when=lambda batch: True)
        orchestrator = EmbeddingOrchestrator(provider, batch_size=2)

        with pytest.raises(EmbeddingError):
            await orchestrator.embed(
                test_async_db, ["a", "b"], MODEL, EmbeddingPurpose.RETRIEVAL, strict=True
            )

    @pytest.mark.asyncio
    async def test_wrong_vector_count_fails_the_batch(self, test_async_db):
        class ShortProvider:
            async def embed_batch(self, texts, model):
                return [[1.0]]

        orchestrator = EmbeddingOrchestrator(ShortProvider(), batch_size=4)

        result = await orchestrator.embed(test_async_db, ["a", "b"], MODEL, EmbeddingPurpose.RETRIEVAL)

        assert result.vectors == [None, None]
        assert result.status == StageStatus.FAILURE

    @pytest.mark.asyncio
    async def test_embed_one(self, test_async_db):
        orchestrator = EmbeddingOrchestrator(FakeEmbeddingProvider())

        vector = await orchestrator.embed_one(test_async_db, "query", MODEL)

        assert vector == hashed_vector("query")

    @pytest.mark.asyncio
    async def test_empty_input_makes_no_calls(self, test_async_db):
        provider = FakeEmbeddingProvider()
        orchestrator = EmbeddingOrchestrator(provider)

        result = await orchestrator.embed(test_async_db, [], MODEL, EmbeddingPurpose.GRAPH)

        assert result.vectors == []
        assert provider.calls == []

    def test_from_config(self):
        config = PipelineConfig(embedding_batch_size=3, embedding_max_concurrency=4)

        orchestrator = EmbeddingOrchestrator.from_config(FakeEmbeddingProvider(), config)

        assert orchestrator._batch_size == 3
        assert orchestrator._max_concurrency == 4

    def test_invalid_limits(self):
        with pytest.raises(ValueError):
            EmbeddingOrchestrator(FakeEmbeddingProvider(), batch_size=0)
