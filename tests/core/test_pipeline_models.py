"""
Tests for stage results, embedding result bookkeeping and run metrics.
"""

from uuid import uuid4

import pytest

from knowledge_core.models import (
    BulkReingestResult,
    EmbeddingBatchResult,
    IngestionMetrics,
    ReingestOutcome,
    StageResult,
    StageStatus,
)


class TestStageResult:
    def test_constructors(self):
        assert StageResult.success("x").status == StageStatus.SUCCESS
        assert StageResult.partial("x", "gap").error == "gap"
        assert StageResult.skipped(None).ok is True

    def test_failure_is_not_ok(self):
        result = StageResult.failure(None, "boom")

        assert result.ok is False
        assert result.value is None


class TestEmbeddingBatchResult:
    @pytest.mark.parametrize(
        "vectors,status",
        [
            ([], StageStatus.SKIPPED),
            ([[1.0], [2.0]], StageStatus.SUCCESS),
            ([[1.0], None], StageStatus.PARTIAL),
            ([None, None], StageStatus.FAILURE),
        ],
    )
    def test_status(self, vectors, status):
        assert EmbeddingBatchResult(vectors=vectors).status == status


class TestIngestionMetrics:
    def test_timed_records_even_on_error(self):
        metrics = IngestionMetrics(document_id=uuid4())

        with pytest.raises(RuntimeError):
            with metrics.timed("summary"):
                raise RuntimeError("stage crashed")
        with metrics.timed("chunking"):
            pass

        assert set(metrics.stage_timings_ms) == {"summary", "chunking"}
        assert metrics.total_ms >= 0

    def test_record_stage_keeps_tag_and_reason(self):
        metrics = IngestionMetrics(document_id=uuid4())

        metrics.record_stage("summary", StageResult.success("text"))
        metrics.record_stage("embedding", StageResult.partial(None, "1 of 2 chunks without embedding"))

        assert metrics.summary_status == StageStatus.SUCCESS
        assert metrics.embedding_status == StageStatus.PARTIAL
        assert metrics.stage_errors == {"embedding": "1 of 2 chunks without embedding"}


class TestBulkReingestResult:
    def test_counts(self):
        result = BulkReingestResult(
            outcomes=[
                ReingestOutcome(document_id=uuid4()),
                ReingestOutcome(document_id=uuid4(), error="boom"),
            ]
        )

        assert (result.succeeded, result.failed) == (1, 1)
