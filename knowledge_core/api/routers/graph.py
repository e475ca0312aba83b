"""
Knowledge graph API endpoints.

Routes: GET /graph, GET /graph/stats, GET /graph/embedding-stats,
    GET /graph/documents/{id}, GET /graph/entities/{id}

Dependencies: knowledge_core.application.services.graph_service
System role: Graph inspection HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from knowledge_core.api.deps import get_graph_service
from knowledge_core.api.routers.router_utils import to_http_exception
from knowledge_core.application.services import GraphService
from knowledge_core.core.exceptions import KnowledgeBaseError
from knowledge_core.models import (
    DocumentGraph,
    EmbeddingStats,
    EntityDetails,
    GraphData,
    GraphStats,
)

router = APIRouter(prefix="/graph", tags=["graph"])


@router.get("", response_model=GraphData)
async def get_graph_data(
    graph_service: GraphService = Depends(get_graph_service),
) -> GraphData:
    """Every entity with its mention count and every edge."""
    return await graph_service.get_graph_data()


@router.get("/stats", response_model=GraphStats)
async def get_graph_stats(
    graph_service: GraphService = Depends(get_graph_service),
) -> GraphStats:
    """Entity and relationship counts with relation type distribution."""
    return await graph_service.get_graph_stats()


@router.get("/embedding-stats", response_model=EmbeddingStats)
async def get_embedding_stats(
    graph_service: GraphService = Depends(get_graph_service),
) -> EmbeddingStats:
    """Chunk and entity embedding coverage and embedding cache size."""
    return await graph_service.get_embedding_stats()


@router.get("/documents/{document_id}", response_model=DocumentGraph)
async def get_document_graph(
    document_id: UUID,
    graph_service: GraphService = Depends(get_graph_service),
) -> DocumentGraph:
    """Entities a document mentions and the edges among them."""
    try:
        return await graph_service.get_document_graph(document_id)
    except KnowledgeBaseError as e:
        raise to_http_exception(e)


@router.get("/entities/{entity_id}", response_model=EntityDetails)
async def get_entity_details(
    entity_id: UUID,
    graph_service: GraphService = Depends(get_graph_service),
) -> EntityDetails:
    """Entity with mentioning documents and its incoming and outgoing edges."""
    try:
        return await graph_service.get_entity_details(entity_id)
    except KnowledgeBaseError as e:
        raise to_http_exception(e)
