"""
Hybrid retrieval engine.

Ranks chunks by cosine similarity to the query embedding, then expands a
local entity neighbourhood: entities named in the query are seeds, their
direct neighbours (bounded per direction) are added in discovery order,
and the edges among all of them are rendered as graph context.

Retrieval augments answers and must never block them: a failed query
embedding yields an empty result instead of an error.

Dependencies: numpy, sqlalchemy, knowledge_core.boundary.db.CRUD,
    knowledge_core.core.embedding
System role: Query path of the knowledge base
"""

import logging
from typing import Sequence

import numpy as np
from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_core.boundary.db.CRUD import (
    ChunkCRUD,
    EntityCRUD,
    RelationshipCRUD,
    chunk_crud,
    entity_crud,
    relationship_crud,
)
from knowledge_core.boundary.db.models import EmbeddingPurpose, EntityModel
from knowledge_core.boundary.providers.embedding_provider import EmbeddingProvider
from knowledge_core.configs import PipelineConfig
from knowledge_core.core.embedding import EmbeddingCache, EmbeddingOrchestrator
from knowledge_core.core.exceptions import RetrievalError
from knowledge_core.models import GraphEdge, RetrievalResult, RetrievedEntity, ScoredChunk
from knowledge_core.observability.log_utils import log_degraded

logger = logging.getLogger(__name__)

GRAPH_CONTEXT_HEADER = "Knowledge Graph Context:"


def cosine_top_k(
    query: Sequence[float],
    candidates: Sequence[Sequence[float]],
    k: int,
) -> list[tuple[int, float]]:
    """
    Indices and similarities of the k candidates most similar to query.

    Similarity is 1 - cosine distance. Ties keep candidate order; a zero
    vector scores 0.

    Args:
        query: Query vector
        candidates: Candidate vectors, all with the query's dimension
        k: Number of results

    Returns:
        list of (candidate index, similarity), similarity descending
    """
    if not candidates or k < 1:
        return []
    q = np.asarray(query, dtype=np.float64)
    matrix = np.asarray(candidates, dtype=np.float64)
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(q)
    dots = matrix @ q
    scores = np.divide(dots, norms, out=np.zeros_like(dots), where=norms > 0)
    order = np.argsort(-scores, kind="stable")[:k]
    return [(int(i), float(scores[i])) for i in order]


class HybridRetriever:
    """Vector search over chunks plus graph expansion over entities."""

    def __init__(
        self,
        config: PipelineConfig,
        orchestrator: EmbeddingOrchestrator,
        chunks: ChunkCRUD = chunk_crud,
        entities: EntityCRUD = entity_crud,
        relationships: RelationshipCRUD = relationship_crud,
    ) -> None:
        self._config = config
        self._orchestrator = orchestrator
        self._chunks = chunks
        self._entities = entities
        self._relationships = relationships

    @classmethod
    def from_config(
        cls,
        provider: EmbeddingProvider,
        config: PipelineConfig,
        cache: EmbeddingCache | None = None,
    ) -> "HybridRetriever":
        return cls(config, EmbeddingOrchestrator.from_config(provider, config, cache))

    async def retrieve(
        self,
        session: AsyncSession,
        query: str,
        k: int | None = None,
    ) -> RetrievalResult:
        """
        Retrieve context for a query.

        Args:
            session: Async database session
            query: User query
            k: Number of chunks (configured top_k when None)

        Returns:
            RetrievalResult: Top-k chunks by similarity, seed and neighbour
            entities in discovery order, and rendered graph context.
            Empty when the query could not be embedded.

        Raises:
            RetrievalError: Blank query or k < 1
        """
        if not query or not query.strip():
            raise RetrievalError("Query must not be empty", query=query)
        k = self._config.top_k if k is None else k
        if k < 1:
            raise RetrievalError("k must be at least 1", query=query, details={"k": k})

        try:
            query_vector = await self._orchestrator.embed_one(
                session,
                query,
                model=self._config.embedding_model,
                purpose=EmbeddingPurpose.RETRIEVAL,
            )
        except Exception as e:
            log_degraded(logger, f"{__name__}:retrieve - Query embedding failed", e)
            query_vector = None
        if query_vector is None:
            logger.warning(f"{__name__}:retrieve - No query embedding, returning empty result")
            return RetrievalResult.empty(query)

        chunks = await self._rank_chunks(session, query_vector, k)
        entities, seeds = await self._expand_entities(session, query)
        edges = await self._edges_between(session, entities)

        lines = list(dict.fromkeys(edge.render() for edge in edges))
        graph_context = "\n".join([GRAPH_CONTEXT_HEADER, *lines]) if lines else ""

        logger.info(
            f"{__name__}:retrieve - {len(chunks)} chunks, {len(seeds)} seed entities, "
            f"{len(entities) - len(seeds)} neighbours, {len(lines)} edges",
            extra={"k": k},
        )
        return RetrievalResult(
            query=query,
            chunks=chunks,
            entities=[
                RetrievedEntity(
                    id=entity.id,
                    name=entity.name,
                    type=entity.type,
                    description=entity.description,
                    is_seed=entity.id in seeds,
                )
                for entity in entities
            ],
            edges=edges,
            graph_context=graph_context,
        )

    async def _rank_chunks(
        self,
        session: AsyncSession,
        query_vector: list[float],
        k: int,
    ) -> list[ScoredChunk]:
        searchable = [
            (chunk, title)
            for chunk, title in await self._chunks.get_searchable(session)
            if chunk.embedding and len(chunk.embedding) == len(query_vector)
        ]
        ranked = cosine_top_k(query_vector, [chunk.embedding for chunk, _ in searchable], k)
        return [
            ScoredChunk(
                chunk_id=searchable[i][0].id,
                document_id=searchable[i][0].document_id,
                document_title=searchable[i][1],
                chunk_index=searchable[i][0].chunk_index,
                content=searchable[i][0].content,
                score=score,
            )
            for i, score in ranked
        ]

    async def _expand_entities(
        self,
        session: AsyncSession,
        query: str,
    ) -> tuple[list[EntityModel], set]:
        seeds = await self._entities.find_named_in(session, query)
        found: dict = {entity.id: entity for entity in seeds}
        fanout = self._config.neighbor_fanout

        if fanout > 0:
            for seed in seeds:
                outgoing = await self._relationships.get_outgoing_neighbors(session, seed.id, fanout)
                incoming = await self._relationships.get_incoming_neighbors(session, seed.id, fanout)
                for neighbor, _ in [*outgoing, *incoming]:
                    found.setdefault(neighbor.id, neighbor)

        return list(found.values()), {seed.id for seed in seeds}

    async def _edges_between(
        self,
        session: AsyncSession,
        entities: list[EntityModel],
    ) -> list[GraphEdge]:
        if not entities:
            return []
        by_id = {entity.id: entity for entity in entities}
        relationships = await self._relationships.get_edges_within(session, by_id.keys())
        return [
            GraphEdge(
                source_id=rel.source_entity_id,
                target_id=rel.target_entity_id,
                source=by_id[rel.source_entity_id].name,
                target=by_id[rel.target_entity_id].name,
                relation_type=rel.relation_type,
                description=rel.description,
                source_document_id=rel.source_document_id,
            )
            for rel in relationships
        ]
