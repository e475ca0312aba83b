"""
Application services.

Exports:
  - DocumentService: ingestion, re-ingestion, status, deletion
  - RetrievalService: hybrid retrieval and prompt context rendering
  - GraphService: read-only knowledge graph views
"""

from knowledge_core.application.services.document_service import DocumentService
from knowledge_core.application.services.graph_service import GraphService
from knowledge_core.application.services.retrieval_service import RetrievalService

__all__ = ["DocumentService", "GraphService", "RetrievalService"]
