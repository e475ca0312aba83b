"""
Read-only views over the knowledge graph.

Dependencies: pydantic
System role: Response models for graph inspection
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class EntityView(BaseModel):
    """Entity without its embedding."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    type: str
    description: str | None = None


class GraphEdge(BaseModel):
    """Directed edge rendered by entity names."""

    source_id: UUID
    target_id: UUID
    source: str
    target: str
    relation_type: str
    description: str | None = None
    source_document_id: UUID | None = None

    def render(self) -> str:
        """Format as `Source --[type]--> Target`."""
        return f"{self.source} --[{self.relation_type}]--> {self.target}"


class GraphStats(BaseModel):
    """Graph size and relation label distribution."""

    entity_count: int
    relationship_count: int
    relation_types: dict[str, int] = Field(default_factory=dict)


class GraphNode(EntityView):
    """Entity in the full graph view, with how often it is mentioned."""

    mention_count: int = 0


class GraphData(BaseModel):
    """Every entity and every edge of the knowledge graph."""

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)


class DocumentGraph(BaseModel):
    """Entities a document mentions and the edges among them."""

    document_id: UUID
    entities: list[EntityView] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)


class MentioningDocument(BaseModel):
    """Document that mentions an entity."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    created_at: datetime


class EntityDetails(BaseModel):
    """Entity with mentioning documents and direct neighbours."""

    entity: EntityView
    documents: list[MentioningDocument] = Field(default_factory=list)
    outgoing: list[GraphEdge] = Field(default_factory=list)
    incoming: list[GraphEdge] = Field(default_factory=list)
