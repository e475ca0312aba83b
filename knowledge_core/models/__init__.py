"""
Domain models for the ingestion and retrieval pipeline.

Pydantic value types passed between pipeline stages and returned by the
service layer. None of them touch the database.
"""

from knowledge_core.models.chunk import ChunkSegment
from knowledge_core.models.content import FetchedContent
from knowledge_core.models.embedding import (
    CacheLookupResult,
    EmbeddingBatchResult,
    EmbeddingStats,
)
from knowledge_core.models.extraction import (
    ENTITY_TYPES,
    ExtractedEntity,
    ExtractedRelationship,
    ExtractionResult,
)
from knowledge_core.models.graph_views import (
    DocumentGraph,
    EntityDetails,
    EntityView,
    GraphData,
    GraphEdge,
    GraphNode,
    GraphStats,
    MentioningDocument,
)
from knowledge_core.models.pipeline_result import (
    BulkReingestResult,
    DocumentStatusView,
    EmbeddingRetryResult,
    GraphUpsertResult,
    IngestionMetrics,
    PipelineResult,
    ReingestOutcome,
)
from knowledge_core.models.requests import (
    BulkReingestRequest,
    IngestTextRequest,
    IngestUrlRequest,
    ReingestRequest,
    RetrieveRequest,
    RetrieveResponse,
)
from knowledge_core.models.retrieval import RetrievalResult, RetrievedEntity, ScoredChunk
from knowledge_core.models.stage_result import StageResult, StageStatus

__all__ = [
    "ChunkSegment",
    "FetchedContent",
    "CacheLookupResult",
    "EmbeddingBatchResult",
    "EmbeddingStats",
    "ENTITY_TYPES",
    "ExtractedEntity",
    "ExtractedRelationship",
    "ExtractionResult",
    "DocumentGraph",
    "EntityDetails",
    "EntityView",
    "GraphData",
    "GraphEdge",
    "GraphNode",
    "GraphStats",
    "MentioningDocument",
    "BulkReingestResult",
    "DocumentStatusView",
    "EmbeddingRetryResult",
    "GraphUpsertResult",
    "IngestionMetrics",
    "PipelineResult",
    "ReingestOutcome",
    "BulkReingestRequest",
    "IngestTextRequest",
    "IngestUrlRequest",
    "ReingestRequest",
    "RetrieveRequest",
    "RetrieveResponse",
    "RetrievalResult",
    "RetrievedEntity",
    "ScoredChunk",
    "StageResult",
    "StageStatus",
]
