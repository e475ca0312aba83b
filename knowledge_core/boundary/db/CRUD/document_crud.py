"""
Document CRUD operations.

Provides Create, Read, Update, Delete operations for DocumentModel
with status transitions and removal of a document's derived graph data.

Dependencies: sqlalchemy, knowledge_core.boundary.db.models
System role: Document persistence operations
"""

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_core.boundary.db.base import utc_now
from knowledge_core.boundary.db.CRUD.base_crud import BaseCRUD
from knowledge_core.boundary.db.models import (
    ChunkModel,
    DocumentModel,
    DocumentStatus,
    EntityMentionModel,
    RelationshipModel,
)

ERROR_MESSAGE_LIMIT = 2000


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """
    CRUD operations for DocumentModel.

    Extends BaseCRUD with status transitions and cleanup of the chunks,
    mentions and relationships a document owns.
    """

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    async def get_all_ids(self, session: AsyncSession) -> list[UUID]:
        """
        List every document id in creation order.

        Args:
            session: Async database session

        Returns:
            list[UUID]: Document ids
        """
        stmt = select(DocumentModel.id).order_by(DocumentModel.created_at, DocumentModel.id)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def mark_processing(
        self,
        session: AsyncSession,
        document: DocumentModel,
    ) -> DocumentModel:
        """
        Move document to PROCESSING.

        Args:
            session: Async database session
            document: Loaded document instance

        Returns:
            DocumentModel: The updated instance
        """
        document.status = DocumentStatus.PROCESSING
        document.updated_at = utc_now()
        await session.flush()
        return document

    async def mark_completed(
        self,
        session: AsyncSession,
        document: DocumentModel,
        content_hash: str | None = None,
        embedding_model: str | None = None,
        embedding_version: str | None = None,
    ) -> DocumentModel:
        """
        Mark document as successfully processed.

        Fingerprint and model are recorded only here, so an interrupted run
        never leaves a fingerprint that would let the next run be skipped.

        Args:
            session: Async database session
            document: Loaded document instance
            content_hash: Fingerprint of the processed content (None keeps existing)
            embedding_model: Model used for chunk vectors (None keeps existing)
            embedding_version: Vector schema version (None keeps existing)

        Returns:
            DocumentModel: The updated instance
        """
        document.status = DocumentStatus.COMPLETED
        document.error_message = None
        if content_hash is not None:
            document.content_hash = content_hash
        if embedding_model is not None:
            document.embedding_model = embedding_model
        if embedding_version is not None:
            document.embedding_version = embedding_version
        document.updated_at = utc_now()
        await session.flush()
        return document

    async def mark_failed(
        self,
        session: AsyncSession,
        document: DocumentModel,
        error_message: str,
    ) -> DocumentModel:
        """
        Mark document as failed with error details.

        Args:
            session: Async database session
            document: Loaded document instance
            error_message: Human-readable error description (truncated to fit column)

        Returns:
            DocumentModel: The updated instance
        """
        document.status = DocumentStatus.FAILED
        document.error_message = error_message[:ERROR_MESSAGE_LIMIT]
        document.updated_at = utc_now()
        await session.flush()
        return document

    async def clear_derived_data(self, session: AsyncSession, document_id: UUID) -> dict[str, int]:
        """
        Delete the chunks, entity mentions and asserted relationships of a document.

        Entities are left in place: they are shared across documents.

        Args:
            session: Async database session
            document_id: Document UUID

        Returns:
            dict[str, int]: Deleted row counts per table
        """
        mentions = await session.execute(
            delete(EntityMentionModel).where(EntityMentionModel.document_id == document_id)
        )
        relationships = await session.execute(
            delete(RelationshipModel).where(RelationshipModel.source_document_id == document_id)
        )
        chunks = await session.execute(
            delete(ChunkModel).where(ChunkModel.document_id == document_id)
        )
        return {
            "entity_mentions": mentions.rowcount,
            "relationships": relationships.rowcount,
            "chunks": chunks.rowcount,
        }

    async def delete_with_children(self, session: AsyncSession, document_id: UUID) -> bool:
        """
        Delete a document together with everything it owns.

        Args:
            session: Async database session
            document_id: Document UUID

        Returns:
            True if the document existed and was deleted
        """
        await self.clear_derived_data(session, document_id)
        return await self.delete_by_id(session, document_id)


document_crud = DocumentCRUD()
