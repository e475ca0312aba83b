"""
Retrieval service.

Dependencies: knowledge_core.core.retrieval
System role: Query-side entry point for UI and chat collaborators
"""

from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_core.core.retrieval import HybridRetriever, build_prompt_context
from knowledge_core.models import RetrievalResult


class RetrievalService:
    """Hybrid retrieval over the knowledge base."""

    def __init__(self, db: AsyncSession, retriever: HybridRetriever) -> None:
        self.db = db
        self._retriever = retriever

    async def retrieve(self, query: str, k: int | None = None) -> RetrievalResult:
        """
        Retrieve chunks and graph context for a query.

        Args:
            query: User query
            k: Number of chunks (configured default when None)

        Returns:
            RetrievalResult: Empty when the query could not be embedded

        Raises:
            RetrievalError: Blank query or k < 1
        """
        result = await self._retriever.retrieve(self.db, query, k)
        # The query embedding may have been added to the cache
        await self.db.commit()
        return result

    def build_prompt_context(self, result: RetrievalResult) -> str:
        return build_prompt_context(result)

    async def retrieve_context(self, query: str, k: int | None = None) -> str:
        """Retrieve and render in one step."""
        return build_prompt_context(await self.retrieve(query, k))
