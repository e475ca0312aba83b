"""Entity resolution and knowledge graph upsert."""

from knowledge_core.core.graph.entity_resolver import EntityResolver, entity_embedding_text

__all__ = ["EntityResolver", "entity_embedding_text"]
