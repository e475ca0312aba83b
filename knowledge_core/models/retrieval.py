"""
Hybrid retrieval result models.

Dependencies: pydantic
System role: Return type of the hybrid retrieval engine
"""

from uuid import UUID

from pydantic import BaseModel, Field

from knowledge_core.models.graph_views import GraphEdge


class ScoredChunk(BaseModel):
    """Chunk ranked by similarity to the query."""

    chunk_id: UUID
    document_id: UUID
    document_title: str
    chunk_index: int
    content: str
    score: float = Field(description="Cosine similarity (1 - cosine distance)")


class RetrievedEntity(BaseModel):
    """Entity in the expanded neighbourhood of the query."""

    id: UUID
    name: str
    type: str
    description: str | None = None
    is_seed: bool = Field(default=False, description="Named literally in the query")


class RetrievalResult(BaseModel):
    """Chunks, entity neighbourhood and rendered graph context for one query."""

    query: str
    chunks: list[ScoredChunk] = Field(default_factory=list)
    entities: list[RetrievedEntity] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)
    graph_context: str = ""

    @classmethod
    def empty(cls, query: str) -> "RetrievalResult":
        return cls(query=query)

    @property
    def is_empty(self) -> bool:
        return not self.chunks and not self.entities
