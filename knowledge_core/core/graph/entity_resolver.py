"""
Entity resolver and graph upsert.

Turns one document's extraction into graph rows:

1. Reuse entities that already exist under the same (name, type).
2. Embed the new ones (graph purpose) and insert them if absent; a row
   another writer created meanwhile is picked up instead.
3. Link every resolved entity to the chunks that mention its name, or to
   the first chunk when no chunk text contains it.
4. Resolve relationship endpoints by name and store the edges; edges that
   name an entity the extraction did not return are dropped.

Dependencies: sqlalchemy, knowledge_core.boundary.db.CRUD,
    knowledge_core.core.embedding
System role: Graph upsert stage of document ingestion pipeline
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_core.boundary.db.CRUD import (
    EntityCRUD,
    EntityMentionCRUD,
    RelationshipCRUD,
    entity_crud,
    entity_mention_crud,
    relationship_crud,
)
from knowledge_core.boundary.db.models import ChunkModel, EmbeddingPurpose
from knowledge_core.core.embedding.orchestrator import EmbeddingOrchestrator
from knowledge_core.models import ExtractedEntity, ExtractionResult, GraphUpsertResult

logger = logging.getLogger(__name__)

DEFAULT_RELATIONSHIP_WEIGHT = 1.0


def entity_embedding_text(name: str, description: str | None) -> str:
    """Text embedded for an entity: `name: description`, or just the name."""
    return f"{name}: {description}" if description else name


def _unique_entities(entities: Sequence[ExtractedEntity]) -> list[ExtractedEntity]:
    """First occurrence per (name, type), filling a missing description from later ones."""
    unique: dict[tuple[str, str], ExtractedEntity] = {}
    for entity in entities:
        current = unique.get(entity.key)
        if current is None:
            unique[entity.key] = entity
        elif current.description is None and entity.description:
            unique[entity.key] = current.model_copy(update={"description": entity.description})
    return list(unique.values())


class EntityResolver:
    """Resolve extracted entities and relationships into persisted graph rows."""

    def __init__(
        self,
        orchestrator: EmbeddingOrchestrator,
        entities: EntityCRUD = entity_crud,
        mentions: EntityMentionCRUD = entity_mention_crud,
        relationships: RelationshipCRUD = relationship_crud,
    ) -> None:
        self._orchestrator = orchestrator
        self._entities = entities
        self._mentions = mentions
        self._relationships = relationships

    async def upsert(
        self,
        session: AsyncSession,
        document_id: UUID,
        extraction: ExtractionResult,
        chunks: Sequence[ChunkModel],
        embedding_model: str,
    ) -> GraphUpsertResult:
        """
        Persist a document's entities, mentions and relationships.

        Args:
            session: Async database session
            document_id: Document the extraction came from
            extraction: Validated extraction output
            chunks: The document's persisted chunks, in index order
            embedding_model: Model used for new entity embeddings

        Returns:
            GraphUpsertResult: Resolved ids and row counts
        """
        result = GraphUpsertResult()
        extracted = _unique_entities(extraction.entities)
        if not extracted:
            if extraction.relationships:
                result.relationships_dropped = len(extraction.relationships)
            return result

        keys = [entity.key for entity in extracted]
        resolved = await self._entities.get_by_keys(session, keys)
        result.entities_reused = len(resolved)

        new_entities = [entity for entity in extracted if entity.key not in resolved]
        if new_entities:
            embedded = await self._orchestrator.embed(
                session,
                [entity_embedding_text(e.name, e.description) for e in new_entities],
                model=embedding_model,
                purpose=EmbeddingPurpose.GRAPH,
            )
            rows = [
                {
                    "name": entity.name,
                    "type": entity.type,
                    "description": entity.description,
                    "embedding": vector,
                }
                for entity, vector in zip(new_entities, embedded.vectors)
            ]
            created = await self._entities.create_if_absent(session, rows)
            resolved.update(created)
            result.entities_created = len(created)
            result.entities_without_embedding = embedded.missing_count

        # Names resolve to the first extracted (name, type) carrying them
        name_to_id: dict[str, UUID] = {}
        for entity in extracted:
            row = resolved.get(entity.key)
            if row is not None:
                name_to_id.setdefault(entity.name, row.id)
        result.entity_ids = name_to_id

        if chunks:
            links = self._mention_links(extracted, resolved, chunks)
            created_mentions = await self._mentions.create_many(session, links, document_id)
            result.mentions_created = len(created_mentions)

        edge_rows, dropped = self._relationship_rows(extraction, name_to_id, document_id)
        if edge_rows:
            await self._relationships.create_many(session, edge_rows)
        result.relationships_created = len(edge_rows)
        result.relationships_dropped = dropped

        logger.info(
            f"{__name__}:upsert - {result.entities_reused} reused, {result.entities_created} created, "
            f"{result.relationships_created} edges ({dropped} dropped)",
            extra={"document_id": str(document_id), "mentions": result.mentions_created},
        )
        return result

    @staticmethod
    def _mention_links(
        extracted: list[ExtractedEntity],
        resolved: dict,
        chunks: Sequence[ChunkModel],
    ) -> list[tuple[UUID, UUID]]:
        lowered = [(chunk.id, chunk.content.lower()) for chunk in chunks]
        links: list[tuple[UUID, UUID]] = []
        for entity in extracted:
            row = resolved.get(entity.key)
            if row is None:
                continue
            needle = entity.name.lower()
            matched = [chunk_id for chunk_id, text in lowered if needle in text]
            for chunk_id in matched or [chunks[0].id]:
                links.append((row.id, chunk_id))
        return links

    @staticmethod
    def _relationship_rows(
        extraction: ExtractionResult,
        name_to_id: dict[str, UUID],
        document_id: UUID,
    ) -> tuple[list[dict], int]:
        folded = {name.casefold(): entity_id for name, entity_id in reversed(name_to_id.items())}

        def lookup(name: str) -> UUID | None:
            return name_to_id.get(name) or folded.get(name.casefold())

        rows: list[dict] = []
        seen: set[tuple[UUID, UUID, str]] = set()
        dropped = 0
        for relationship in extraction.relationships:
            source_id = lookup(relationship.source)
            target_id = lookup(relationship.target)
            if source_id is None or target_id is None:
                dropped += 1
                continue
            edge_key = (source_id, target_id, relationship.type)
            if edge_key in seen:
                continue
            seen.add(edge_key)
            rows.append(
                {
                    "source_entity_id": source_id,
                    "target_entity_id": target_id,
                    "relation_type": relationship.type,
                    "description": relationship.description,
                    "weight": DEFAULT_RELATIONSHIP_WEIGHT,
                    "source_document_id": document_id,
                }
            )
        return rows, dropped
