"""
EntityMention CRUD operations.

Dependencies: sqlalchemy, knowledge_core.boundary.db.models
System role: Chunk-to-entity link persistence
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_core.boundary.db.CRUD.base_crud import BaseCRUD
from knowledge_core.boundary.db.models import DocumentModel, EntityMentionModel


class EntityMentionCRUD(BaseCRUD[EntityMentionModel]):
    """CRUD operations for EntityMentionModel."""

    def __init__(self) -> None:
        """Initialize EntityMentionCRUD with EntityMentionModel."""
        super().__init__(EntityMentionModel)

    async def create_many(
        self,
        session: AsyncSession,
        links: list[tuple[UUID, UUID]],
        document_id: UUID,
        confidence: float = 1.0,
    ) -> list[EntityMentionModel]:
        """
        Create mention rows for (entity_id, chunk_id) pairs of one document.

        Args:
            session: Async database session
            links: (entity_id, chunk_id) pairs, duplicates ignored
            document_id: Document the chunks belong to
            confidence: Confidence stored on every row

        Returns:
            list[EntityMentionModel]: Created rows
        """
        instances = [
            EntityMentionModel(
                entity_id=entity_id,
                chunk_id=chunk_id,
                document_id=document_id,
                confidence=confidence,
            )
            for entity_id, chunk_id in dict.fromkeys(links)
        ]
        session.add_all(instances)
        await session.flush()
        return instances

    async def count_by_document(self, session: AsyncSession, document_id: UUID) -> int:
        """Count mention rows of a document."""
        return await self.count(session, EntityMentionModel.document_id == document_id)

    async def count_per_entity(self, session: AsyncSession) -> dict[UUID, int]:
        """
        Number of mention rows per entity.

        Args:
            session: Async database session

        Returns:
            dict[UUID, int]: entity_id -> mentions; unmentioned entities are absent
        """
        stmt = select(EntityMentionModel.entity_id, func.count()).group_by(
            EntityMentionModel.entity_id
        )
        result = await session.execute(stmt)
        return {entity_id: int(count) for entity_id, count in result.all()}

    async def get_entity_ids_for_document(
        self,
        session: AsyncSession,
        document_id: UUID,
    ) -> list[UUID]:
        """
        Distinct entity ids mentioned by a document, in first-mention order.

        Args:
            session: Async database session
            document_id: Document UUID

        Returns:
            list[UUID]: Entity ids
        """
        stmt = (
            select(EntityMentionModel.entity_id)
            .where(EntityMentionModel.document_id == document_id)
            .order_by(EntityMentionModel.created_at)
        )
        result = await session.execute(stmt)
        return list(dict.fromkeys(result.scalars().all()))

    async def get_documents_for_entity(
        self,
        session: AsyncSession,
        entity_id: UUID,
    ) -> Sequence[DocumentModel]:
        """
        Documents mentioning an entity, newest first.

        Args:
            session: Async database session
            entity_id: Entity UUID

        Returns:
            Sequence of DocumentModels
        """
        stmt = (
            select(DocumentModel)
            .where(
                DocumentModel.id.in_(
                    select(EntityMentionModel.document_id).where(
                        EntityMentionModel.entity_id == entity_id
                    )
                )
            )
            .order_by(DocumentModel.created_at.desc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()


entity_mention_crud = EntityMentionCRUD()
