"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(), create_tables()
  - Document, Chunk, Entity, EntityMention, Relationship, EmbeddingCache models
  - CRUD singletons for each model

Dependencies: sqlalchemy, knowledge_core.configs
System role: Database adapter providing persistent storage for documents,
chunks, the knowledge graph, and the shared embedding cache.
"""

from knowledge_core.boundary.db.base import Base, TimestampMixin, UUIDMixin
from knowledge_core.boundary.db.connection import (
    create_tables,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from knowledge_core.boundary.db.models import (
    ChunkModel,
    DocumentModel,
    DocumentStatus,
    EmbeddingCacheModel,
    EmbeddingPurpose,
    EmbeddingStatus,
    EntityMentionModel,
    EntityModel,
    RelationshipModel,
    SourceType,
)
from knowledge_core.boundary.db.CRUD import (
    BaseCRUD,
    chunk_crud,
    document_crud,
    embedding_cache_crud,
    entity_crud,
    entity_mention_crud,
    relationship_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection management
    "create_tables",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "ChunkModel",
    "DocumentModel",
    "DocumentStatus",
    "EmbeddingCacheModel",
    "EmbeddingPurpose",
    "EmbeddingStatus",
    "EntityMentionModel",
    "EntityModel",
    "RelationshipModel",
    "SourceType",
    # CRUD
    "BaseCRUD",
    "chunk_crud",
    "document_crud",
    "embedding_cache_crud",
    "entity_crud",
    "entity_mention_crud",
    "relationship_crud",
]
