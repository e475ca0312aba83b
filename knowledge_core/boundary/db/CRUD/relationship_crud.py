"""
Relationship CRUD operations.

Edge-list persistence and the neighbourhood queries used by graph
traversal. All traversal goes through entity ids; no object graph is
ever materialised, so cycles need no special handling.

Dependencies: sqlalchemy, knowledge_core.boundary.db.models
System role: Graph edge persistence and traversal queries
"""

from typing import Any, Iterable, Sequence
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_core.boundary.db.CRUD.base_crud import BaseCRUD
from knowledge_core.boundary.db.models import EntityModel, RelationshipModel


class RelationshipCRUD(BaseCRUD[RelationshipModel]):
    """CRUD operations for RelationshipModel."""

    def __init__(self) -> None:
        """Initialize RelationshipCRUD with RelationshipModel."""
        super().__init__(RelationshipModel)

    async def create_many(
        self,
        session: AsyncSession,
        rows: list[dict[str, Any]],
    ) -> list[RelationshipModel]:
        """
        Persist edges.

        Args:
            session: Async database session
            rows: Dicts with source_entity_id, target_entity_id, relation_type,
                description, weight, source_document_id

        Returns:
            list[RelationshipModel]: Created edges
        """
        instances = [RelationshipModel(**row) for row in rows]
        session.add_all(instances)
        await session.flush()
        return instances

    async def get_outgoing_neighbors(
        self,
        session: AsyncSession,
        entity_id: UUID,
        limit: int,
    ) -> list[tuple[EntityModel, str]]:
        """
        Entities reached by edges leaving entity_id.

        Args:
            session: Async database session
            entity_id: Edge tail
            limit: Maximum number of edges followed

        Returns:
            list of (target entity, relation_type) in edge creation order
        """
        stmt = (
            select(EntityModel, RelationshipModel.relation_type)
            .join(RelationshipModel, RelationshipModel.target_entity_id == EntityModel.id)
            .where(RelationshipModel.source_entity_id == entity_id)
            .order_by(RelationshipModel.created_at, RelationshipModel.id)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return [(entity, relation_type) for entity, relation_type in result.all()]

    async def get_incoming_neighbors(
        self,
        session: AsyncSession,
        entity_id: UUID,
        limit: int,
    ) -> list[tuple[EntityModel, str]]:
        """
        Entities with edges pointing at entity_id.

        Args:
            session: Async database session
            entity_id: Edge head
            limit: Maximum number of edges followed

        Returns:
            list of (source entity, relation_type) in edge creation order
        """
        stmt = (
            select(EntityModel, RelationshipModel.relation_type)
            .join(RelationshipModel, RelationshipModel.source_entity_id == EntityModel.id)
            .where(RelationshipModel.target_entity_id == entity_id)
            .order_by(RelationshipModel.created_at, RelationshipModel.id)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return [(entity, relation_type) for entity, relation_type in result.all()]

    async def get_edges_within(
        self,
        session: AsyncSession,
        entity_ids: Iterable[UUID],
    ) -> Sequence[RelationshipModel]:
        """
        Edges whose both endpoints are in entity_ids.

        Args:
            session: Async database session
            entity_ids: Entity UUIDs forming the subgraph

        Returns:
            Sequence of RelationshipModels in creation order
        """
        ids = list(set(entity_ids))
        if not ids:
            return []
        stmt = (
            select(RelationshipModel)
            .where(RelationshipModel.source_entity_id.in_(ids))
            .where(RelationshipModel.target_entity_id.in_(ids))
            .order_by(RelationshipModel.created_at, RelationshipModel.id)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_edges_touching(
        self,
        session: AsyncSession,
        entity_id: UUID,
    ) -> Sequence[RelationshipModel]:
        """
        Every edge with entity_id at either end.

        Args:
            session: Async database session
            entity_id: Entity UUID

        Returns:
            Sequence of RelationshipModels in creation order
        """
        stmt = (
            select(RelationshipModel)
            .where(
                or_(
                    RelationshipModel.source_entity_id == entity_id,
                    RelationshipModel.target_entity_id == entity_id,
                )
            )
            .order_by(RelationshipModel.created_at, RelationshipModel.id)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_by_document(self, session: AsyncSession, document_id: UUID) -> int:
        """Count edges asserted by a document."""
        return await self.count(session, RelationshipModel.source_document_id == document_id)

    async def type_distribution(self, session: AsyncSession) -> dict[str, int]:
        """
        Number of edges per relation type.

        Args:
            session: Async database session

        Returns:
            dict[str, int]: relation_type -> count
        """
        stmt = select(RelationshipModel.relation_type, func.count()).group_by(
            RelationshipModel.relation_type
        )
        result = await session.execute(stmt)
        return {relation_type: int(count) for relation_type, count in result.all()}


relationship_crud = RelationshipCRUD()
