"""
Database models package.

Exports:
  - DocumentModel, DocumentStatus, SourceType: Document ORM model and enums
  - ChunkModel, EmbeddingStatus: Chunk ORM model and embedding state
  - EntityModel, EntityMentionModel, RelationshipModel: Knowledge graph tables
  - EmbeddingCacheModel, EmbeddingPurpose: Shared embedding cache

Dependencies: sqlalchemy, knowledge_core.boundary.db.base
System role: Database model definitions for domain entities
"""

from knowledge_core.boundary.db.models.document_model import (
    DocumentModel,
    DocumentStatus,
    SourceType,
)
from knowledge_core.boundary.db.models.chunk_model import ChunkModel, EmbeddingStatus
from knowledge_core.boundary.db.models.entity_model import EntityModel
from knowledge_core.boundary.db.models.entity_mention_model import EntityMentionModel
from knowledge_core.boundary.db.models.relationship_model import RelationshipModel
from knowledge_core.boundary.db.models.embedding_cache_model import (
    EmbeddingCacheModel,
    EmbeddingPurpose,
)

__all__ = [
    "DocumentModel",
    "DocumentStatus",
    "SourceType",
    "ChunkModel",
    "EmbeddingStatus",
    "EntityModel",
    "EntityMentionModel",
    "RelationshipModel",
    "EmbeddingCacheModel",
    "EmbeddingPurpose",
]
