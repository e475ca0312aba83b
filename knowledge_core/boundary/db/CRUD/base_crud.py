"""
Generic data access shared by the table-specific CRUD classes.

Nothing here commits: callers own the transaction, CRUD methods only
flush so generated ids and defaults are visible.
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_core.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)

_UPSERT_DIALECTS = {"postgresql": postgresql.insert, "sqlite": sqlite.insert}


class BaseCRUD(Generic[ModelT]):
    """
    Row access for one model class.

    Attributes:
        model: Mapped class every query targets
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **values) -> ModelT:
        """Add one row, flush, and return it with server-side state loaded."""
        instance = self.model(**values)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        result = await session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_all(
        self,
        session: AsyncSession,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[ModelT]:
        """Rows in creation order; ``id`` breaks ties between equal timestamps."""
        stmt = select(self.model).order_by(self.model.created_at, self.model.id).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        return (await session.execute(stmt)).scalars().all()

    async def delete_by_id(self, session: AsyncSession, id: UUID) -> bool:
        """Delete by primary key; False when no row matched."""
        result = await session.execute(delete(self.model).where(self.model.id == id))
        return result.rowcount > 0

    async def exists(self, session: AsyncSession, id: UUID) -> bool:
        result = await session.execute(select(self.model.id).where(self.model.id == id))
        return result.first() is not None

    async def count(self, session: AsyncSession, *criteria) -> int:
        """Number of rows matching ``criteria`` (all rows when none given)."""
        stmt = select(func.count()).select_from(self.model)
        if criteria:
            stmt = stmt.where(*criteria)
        return int((await session.execute(stmt)).scalar_one())

    async def insert_if_absent(
        self,
        session: AsyncSession,
        rows: list[dict[str, Any]],
        conflict_columns: list[str],
    ) -> None:
        """
        Insert ``rows``, leaving any row whose unique key already exists untouched.

        PostgreSQL and SQLite get ``INSERT ... ON CONFLICT DO NOTHING`` on
        ``conflict_columns``, so a concurrent writer that got there first
        turns the insert into a no-op. Other backends insert row by row
        inside a savepoint and skip duplicates.

        Args:
            session: Async database session
            rows: One dict of column values per row, all with the same keys
            conflict_columns: Columns of the unique constraint
        """
        if not rows:
            return

        insert = _UPSERT_DIALECTS.get(session.get_bind().dialect.name)
        if insert is not None:
            stmt = insert(self.model).on_conflict_do_nothing(index_elements=conflict_columns)
            await session.execute(stmt, rows)
            return

        for row in rows:
            try:
                async with session.begin_nested():
                    session.add(self.model(**row))
            except IntegrityError:
                continue
