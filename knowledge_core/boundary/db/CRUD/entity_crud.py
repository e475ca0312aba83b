"""
Entity CRUD operations.

Lookup and race-safe creation of knowledge graph nodes keyed by
(name, type).

Dependencies: sqlalchemy, knowledge_core.boundary.db.models
System role: Graph node persistence operations
"""

from typing import Any, Iterable, Sequence
from uuid import UUID

from sqlalchemy import and_, func, literal, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_core.boundary.db.CRUD.base_crud import BaseCRUD
from knowledge_core.boundary.db.models import EntityModel

EntityKey = tuple[str, str]


class EntityCRUD(BaseCRUD[EntityModel]):
    """CRUD operations for EntityModel."""

    def __init__(self) -> None:
        """Initialize EntityCRUD with EntityModel."""
        super().__init__(EntityModel)

    async def get_by_name_type(
        self,
        session: AsyncSession,
        name: str,
        type: str,
    ) -> EntityModel | None:
        """
        Retrieve an entity by its natural key.

        Args:
            session: Async database session
            name: Entity name (exact match)
            type: Entity type (exact match)

        Returns:
            EntityModel if found, None otherwise
        """
        stmt = select(EntityModel).where(EntityModel.name == name, EntityModel.type == type)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_keys(
        self,
        session: AsyncSession,
        keys: Iterable[EntityKey],
    ) -> dict[EntityKey, EntityModel]:
        """
        Retrieve entities for many (name, type) pairs at once.

        Args:
            session: Async database session
            keys: (name, type) pairs

        Returns:
            dict mapping each found key to its EntityModel
        """
        keys = list(dict.fromkeys(keys))
        if not keys:
            return {}
        condition = or_(
            *(and_(EntityModel.name == name, EntityModel.type == type) for name, type in keys)
        )
        result = await session.execute(select(EntityModel).where(condition))
        return {(entity.name, entity.type): entity for entity in result.scalars().all()}

    async def get_by_ids(
        self,
        session: AsyncSession,
        ids: Iterable[UUID],
    ) -> dict[UUID, EntityModel]:
        """
        Retrieve entities by primary key.

        Args:
            session: Async database session
            ids: Entity UUIDs

        Returns:
            dict mapping id to EntityModel for the ids that exist
        """
        ids = list(set(ids))
        if not ids:
            return {}
        result = await session.execute(select(EntityModel).where(EntityModel.id.in_(ids)))
        return {entity.id: entity for entity in result.scalars().all()}

    async def create_if_absent(
        self,
        session: AsyncSession,
        rows: list[dict[str, Any]],
    ) -> dict[EntityKey, EntityModel]:
        """
        Insert entities that do not exist yet and return all of them.

        A row whose (name, type) was inserted meanwhile by another writer
        resolves to that existing row; its description and embedding are
        not overwritten.

        Args:
            session: Async database session
            rows: Dicts with name, type, description, embedding

        Returns:
            dict mapping (name, type) to the persisted EntityModel
        """
        if not rows:
            return {}
        await self.insert_if_absent(session, rows, conflict_columns=["name", "type"])
        return await self.get_by_keys(session, ((row["name"], row["type"]) for row in rows))

    async def find_named_in(
        self,
        session: AsyncSession,
        text: str,
    ) -> list[EntityModel]:
        """
        Entities whose name occurs in text, case-insensitively.

        Args:
            session: Async database session
            text: Free text, e.g. a search query

        Returns:
            list[EntityModel]: Ordered by first occurrence in text, then creation order
        """
        haystack = text.lower()
        if not haystack.strip():
            return []
        stmt = (
            select(EntityModel)
            .where(literal(haystack).contains(func.lower(EntityModel.name)))
            .order_by(EntityModel.created_at, EntityModel.id)
        )
        result = await session.execute(stmt)
        # LIKE treats % and _ in names as wildcards; re-check literally
        matches = [
            entity
            for entity in result.scalars().all()
            if entity.name and entity.name.lower() in haystack
        ]
        return sorted(matches, key=lambda entity: haystack.find(entity.name.lower()))

    async def get_all_ordered(self, session: AsyncSession) -> Sequence[EntityModel]:
        """
        Retrieve every entity in discovery (creation) order.

        Args:
            session: Async database session

        Returns:
            Sequence of EntityModels
        """
        return await self.get_all(session)

    async def count_with_embeddings(self, session: AsyncSession) -> int:
        """Number of entities that carry a name embedding."""
        return await self.count(session, EntityModel.embedding.is_not(None))


entity_crud = EntityCRUD()
