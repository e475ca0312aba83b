"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from knowledge_core.boundary.db.CRUD import document_crud, chunk_crud

    # Use singleton instances
    document = await document_crud.get_by_id(db, document_id)

    # Or instantiate classes directly for custom behavior
    from knowledge_core.boundary.db.CRUD import DocumentCRUD
    custom_crud = DocumentCRUD()
"""

from knowledge_core.boundary.db.CRUD.base_crud import BaseCRUD
from knowledge_core.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from knowledge_core.boundary.db.CRUD.chunk_crud import ChunkCRUD, chunk_crud
from knowledge_core.boundary.db.CRUD.entity_crud import EntityCRUD, entity_crud
from knowledge_core.boundary.db.CRUD.entity_mention_crud import (
    EntityMentionCRUD,
    entity_mention_crud,
)
from knowledge_core.boundary.db.CRUD.relationship_crud import (
    RelationshipCRUD,
    relationship_crud,
)
from knowledge_core.boundary.db.CRUD.embedding_cache_crud import (
    EmbeddingCacheCRUD,
    embedding_cache_crud,
)

__all__ = [
    "BaseCRUD",
    "DocumentCRUD",
    "document_crud",
    "ChunkCRUD",
    "chunk_crud",
    "EntityCRUD",
    "entity_crud",
    "EntityMentionCRUD",
    "entity_mention_crud",
    "RelationshipCRUD",
    "relationship_crud",
    "EmbeddingCacheCRUD",
    "embedding_cache_crud",
]
