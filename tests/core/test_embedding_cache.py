"""
Unit tests for the content-addressed embedding cache.

Runs against the in-memory SQLite session so hits, misses and
insert-if-absent behave as they do against a real store.
"""

import pytest

from knowledge_core.boundary.db.CRUD import embedding_cache_crud
from knowledge_core.boundary.db.models import EmbeddingCacheModel, EmbeddingPurpose
from knowledge_core.core.embedding import EmbeddingCache
from knowledge_core.core.fingerprint import embedding_cache_key

MODEL = "cache-test-model"


class RecordingCompute:
    """Compute callback that records its inputs and returns fixed vectors."""

    def __init__(self, fail: bool = False, none_for: set[str] | None = None):
        self.calls: list[list[str]] = []
        self.fail = fail
        self.none_for = none_for or set()

    async def __call__(self, texts: list[str]) -> list[list[float] | None]:
        self.calls.append(list(texts))
        if self.fail:
            raise RuntimeError("embedding backend exploded")
        return [None if t in self.none_for else [float(len(t)), 1.0] for t in texts]


@pytest.fixture
def cache() -> EmbeddingCache:
    return EmbeddingCache()


class TestGetOrCreate:
    @pytest.mark.asyncio
    async def test_empty_input(self, test_async_db, cache):
        compute = RecordingCompute()

        result = await cache.get_or_create(test_async_db, [], MODEL, EmbeddingPurpose.RETRIEVAL, compute)

        assert result.vectors == []
        assert compute.calls == []

    @pytest.mark.asyncio
    async def test_second_call_is_served_from_cache(self, test_async_db, cache):
        compute = RecordingCompute()
        texts = ["alpha", "beta"]

        first = await cache.get_or_create(test_async_db, texts, MODEL, EmbeddingPurpose.RETRIEVAL, compute)
        second = await cache.get_or_create(test_async_db, texts, MODEL, EmbeddingPurpose.RETRIEVAL, compute)

        assert compute.calls == [["alpha", "beta"]]
        assert first.vectors == second.vectors
        assert (first.hits, first.misses) == (0, 2)
        assert (second.hits, second.misses) == (2, 0)

    @pytest.mark.asyncio
    async def test_duplicates_computed_once_order_preserved(self, test_async_db, cache):
        compute = RecordingCompute()

        result = await cache.get_or_create(
            test_async_db,
            ["bb", "a", "bb", "ccc"],
            MODEL,
            EmbeddingPurpose.RETRIEVAL,
            compute,
        )

        assert compute.calls == [["bb", "a", "ccc"]]
        assert result.vectors == [[2.0, 1.0], [1.0, 1.0], [2.0, 1.0], [3.0, 1.0]]
        assert result.misses == 4

    @pytest.mark.asyncio
    async def test_only_misses_are_computed(self, test_async_db, cache):
        compute = RecordingCompute()
        await cache.get_or_create(test_async_db, ["known"], MODEL, EmbeddingPurpose.RETRIEVAL, compute)

        result = await cache.get_or_create(
            test_async_db, ["known", "fresh"], MODEL, EmbeddingPurpose.RETRIEVAL, compute
        )

        assert compute.calls[-1] == ["fresh"]
        assert result.hits == 1
        assert result.misses == 1

    @pytest.mark.asyncio
    async def test_none_results_are_not_cached(self, test_async_db, cache):
        failing = RecordingCompute(none_for={"flaky"})

        first = await cache.get_or_create(
            test_async_db, ["flaky", "fine"], MODEL, EmbeddingPurpose.RETRIEVAL, failing
        )
        assert first.vectors[0] is None
        assert first.vectors[1] == [4.0, 1.0]

        retry = RecordingCompute()
        second = await cache.get_or_create(
            test_async_db, ["flaky", "fine"], MODEL, EmbeddingPurpose.RETRIEVAL, retry
        )

        assert retry.calls == [["flaky"]]
        assert second.vectors == [[5.0, 1.0], [4.0, 1.0]]

    @pytest.mark.asyncio
    async def test_compute_error_propagates_and_writes_nothing(self, test_async_db, cache):
        compute = RecordingCompute(fail=True)

        with pytest.raises(RuntimeError, match="exploded"):
            await cache.get_or_create(test_async_db, ["x"], MODEL, EmbeddingPurpose.RETRIEVAL, compute)

        assert await embedding_cache_crud.count(test_async_db) == 0

    @pytest.mark.asyncio
    async def test_purposes_are_cached_separately(self, test_async_db, cache):
        compute = RecordingCompute()

        await cache.get_or_create(test_async_db, ["Alpha"], MODEL, EmbeddingPurpose.RETRIEVAL, compute)
        await cache.get_or_create(test_async_db, ["Alpha"], MODEL, EmbeddingPurpose.GRAPH, compute)
        await cache.get_or_create(test_async_db, ["Alpha"], "other-model", EmbeddingPurpose.GRAPH, compute)

        assert len(compute.calls) == 3
        assert await embedding_cache_crud.count(test_async_db) == 3

    @pytest.mark.asyncio
    async def test_whitespace_variants_share_an_entry(self, test_async_db, cache):
        compute = RecordingCompute()

        await cache.get_or_create(test_async_db, ["two  words"], MODEL, EmbeddingPurpose.RETRIEVAL, compute)
        result = await cache.get_or_create(
            test_async_db, [" two words\n"], MODEL, EmbeddingPurpose.RETRIEVAL, compute
        )

        assert len(compute.calls) == 1
        assert result.hits == 1

    @pytest.mark.asyncio
    async def test_mismatched_compute_output_raises(self, test_async_db, cache):
        from knowledge_core.core.exceptions import EmbeddingError

        async def short(texts):
            return [[1.0]]

        with pytest.raises(EmbeddingError):
            await cache.get_or_create(test_async_db, ["a", "b"], MODEL, EmbeddingPurpose.RETRIEVAL, short)


class TestEmbeddingCacheCRUD:
    @pytest.mark.asyncio
    async def test_put_many_keeps_existing_vector(self, test_async_db):
        key = embedding_cache_key("shared text")

        await embedding_cache_crud.put_many(test_async_db, {key: [1.0, 0.0]}, MODEL, EmbeddingPurpose.GRAPH)
        # A concurrent writer losing the race is a no-op, not an error
        await embedding_cache_crud.put_many(test_async_db, {key: [0.0, 1.0]}, MODEL, EmbeddingPurpose.GRAPH)

        cached = await embedding_cache_crud.get_many(test_async_db, [key], MODEL, EmbeddingPurpose.GRAPH)
        assert cached == {key: [1.0, 0.0]}
        assert await embedding_cache_crud.count(test_async_db, EmbeddingCacheModel.model == MODEL) == 1

    @pytest.mark.asyncio
    async def test_get_many_unknown_keys(self, test_async_db):
        cached = await embedding_cache_crud.get_many(
            test_async_db, ["nope"], MODEL, EmbeddingPurpose.RETRIEVAL
        )

        assert cached == {}
