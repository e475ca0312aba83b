"""
Retrieval API endpoints.

Routes: POST /retrieve

Dependencies: knowledge_core.application.services.retrieval_service
System role: Hybrid retrieval HTTP API
"""

from fastapi import APIRouter, Depends

from knowledge_core.api.deps import get_retrieval_service
from knowledge_core.api.routers.router_utils import to_http_exception
from knowledge_core.application.services import RetrievalService
from knowledge_core.core.exceptions import KnowledgeBaseError
from knowledge_core.models import RetrieveRequest, RetrieveResponse

router = APIRouter(tags=["retrieval"])


@router.post("/retrieve", response_model=RetrieveResponse)
async def retrieve(
    request: RetrieveRequest,
    retrieval_service: RetrievalService = Depends(get_retrieval_service),
) -> RetrieveResponse:
    """
    Retrieve chunks, entities and graph context for a query.

    An empty result (not an error) is returned when the query could not be
    embedded.
    """
    try:
        result = await retrieval_service.retrieve(request.query, request.k)
    except KnowledgeBaseError as e:
        raise to_http_exception(e)
    return RetrieveResponse(
        result=result,
        prompt_context=retrieval_service.build_prompt_context(result),
    )
