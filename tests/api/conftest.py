"""
API test fixtures: app without lifespan and mocked services.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from knowledge_core.api.deps import (
    get_document_service,
    get_graph_service,
    get_retrieval_service,
)
from knowledge_core.api.main import create_app
from knowledge_core.application.services import DocumentService, GraphService, RetrievalService


@pytest.fixture
def app():
    """FastAPI app with no startup side effects."""
    application = create_app(use_lifespan=False)
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def document_service(app):
    service = AsyncMock(spec=DocumentService)
    app.dependency_overrides[get_document_service] = lambda: service
    return service


@pytest.fixture
def retrieval_service(app):
    service = AsyncMock(spec=RetrievalService)
    service.build_prompt_context = MagicMock(return_value="rendered context")
    app.dependency_overrides[get_retrieval_service] = lambda: service
    return service


@pytest.fixture
def graph_service(app):
    service = AsyncMock(spec=GraphService)
    app.dependency_overrides[get_graph_service] = lambda: service
    return service


@pytest.fixture
def client(app):
    return TestClient(app)
