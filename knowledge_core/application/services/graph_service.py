"""
Knowledge graph read service.

Full-graph and per-document/per-entity views, plus corpus-wide graph and
embedding statistics.

Dependencies: knowledge_core.boundary.db.CRUD
System role: Graph inspection for UI collaborators
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_core.boundary.db.CRUD import (
    chunk_crud,
    document_crud,
    embedding_cache_crud,
    entity_crud,
    entity_mention_crud,
    relationship_crud,
)
from knowledge_core.boundary.db.models import EmbeddingStatus, EntityModel, RelationshipModel
from knowledge_core.core.exceptions import DocumentNotFoundError, EntityNotFoundError
from knowledge_core.models import (
    DocumentGraph,
    EmbeddingStats,
    EntityDetails,
    EntityView,
    GraphData,
    GraphEdge,
    GraphNode,
    GraphStats,
    MentioningDocument,
)

logger = logging.getLogger(__name__)


def _edge(relationship: RelationshipModel, names: dict[UUID, EntityModel]) -> GraphEdge:
    return GraphEdge(
        source_id=relationship.source_entity_id,
        target_id=relationship.target_entity_id,
        source=names[relationship.source_entity_id].name,
        target=names[relationship.target_entity_id].name,
        relation_type=relationship.relation_type,
        description=relationship.description,
        source_document_id=relationship.source_document_id,
    )


class GraphService:
    """Read-only views over entities and relationships."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_graph_stats(self) -> GraphStats:
        """Entity and relationship counts with the relation type distribution."""
        return GraphStats(
            entity_count=await entity_crud.count(self.db),
            relationship_count=await relationship_crud.count(self.db),
            relation_types=await relationship_crud.type_distribution(self.db),
        )

    async def get_graph_data(self) -> GraphData:
        """
        The whole graph: every entity with its mention count and every edge.

        Returns:
            GraphData: Nodes and edges, both in creation order
        """
        entities = await entity_crud.get_all_ordered(self.db)
        mention_counts = await entity_mention_crud.count_per_entity(self.db)
        by_id = {entity.id: entity for entity in entities}
        edges = await relationship_crud.get_all(self.db)
        return GraphData(
            nodes=[
                GraphNode.model_validate(entity).model_copy(
                    update={"mention_count": mention_counts.get(entity.id, 0)}
                )
                for entity in entities
            ],
            edges=[_edge(edge, by_id) for edge in edges],
        )

    async def get_embedding_stats(self) -> EmbeddingStats:
        """
        Embedding coverage of chunks and entities, and embedding cache size.

        Returns:
            EmbeddingStats: Corpus-wide counts and averages
        """
        document_count = await document_crud.count(self.db)
        chunk_count = await chunk_crud.count(self.db)
        by_status = await chunk_crud.count_by_status(self.db)
        unique_hashes = await chunk_crud.count_unique_hashes(self.db)
        entity_count = await entity_crud.count(self.db)
        with_embeddings = await entity_crud.count_with_embeddings(self.db)

        logger.info(
            f"{__name__}:get_embedding_stats - Collected embedding stats",
            extra={"documents": document_count, "chunks": chunk_count},
        )
        return EmbeddingStats(
            document_count=document_count,
            chunk_count=chunk_count,
            cache_entry_count=await embedding_cache_crud.count(self.db),
            embedded_chunks=by_status[EmbeddingStatus.EMBEDDED],
            pending_chunks=by_status[EmbeddingStatus.PENDING],
            unique_content_hashes=unique_hashes,
            duplicate_chunks=chunk_count - unique_hashes,
            avg_chunks_per_document=chunk_count / document_count if document_count else 0.0,
            avg_tokens_per_chunk=await chunk_crud.average_token_count(self.db),
            entity_count=entity_count,
            entities_with_embeddings=with_embeddings,
            entities_without_embeddings=entity_count - with_embeddings,
        )

    async def get_document_graph(self, document_id: UUID) -> DocumentGraph:
        """
        Entities a document mentions and the edges among them.

        Args:
            document_id: Document UUID

        Returns:
            DocumentGraph: Entities in first-mention order, edges in creation order

        Raises:
            DocumentNotFoundError: Unknown id
        """
        if not await document_crud.exists(self.db, document_id):
            raise DocumentNotFoundError(str(document_id))

        entity_ids = await entity_mention_crud.get_entity_ids_for_document(self.db, document_id)
        by_id = await entity_crud.get_by_ids(self.db, entity_ids)
        edges = await relationship_crud.get_edges_within(self.db, by_id.keys())
        return DocumentGraph(
            document_id=document_id,
            entities=[EntityView.model_validate(by_id[i]) for i in entity_ids if i in by_id],
            edges=[_edge(edge, by_id) for edge in edges],
        )

    async def get_entity_details(self, entity_id: UUID) -> EntityDetails:
        """
        An entity with the documents mentioning it and all its edges.

        Args:
            entity_id: Entity UUID

        Returns:
            EntityDetails

        Raises:
            EntityNotFoundError: Unknown id
        """
        entity = await entity_crud.get_by_id(self.db, entity_id)
        if entity is None:
            raise EntityNotFoundError(str(entity_id))

        documents = await entity_mention_crud.get_documents_for_entity(self.db, entity_id)
        edges = await relationship_crud.get_edges_touching(self.db, entity_id)
        endpoint_ids = {e.source_entity_id for e in edges} | {e.target_entity_id for e in edges}
        by_id = await entity_crud.get_by_ids(self.db, endpoint_ids | {entity_id})

        return EntityDetails(
            entity=EntityView.model_validate(entity),
            documents=[MentioningDocument.model_validate(doc) for doc in documents],
            outgoing=[_edge(e, by_id) for e in edges if e.source_entity_id == entity_id],
            incoming=[
                _edge(e, by_id)
                for e in edges
                if e.target_entity_id == entity_id and e.source_entity_id != entity_id
            ],
        )
