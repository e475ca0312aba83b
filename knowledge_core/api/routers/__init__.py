"""API routers."""

from .documents import router as documents_router
from .graph import router as graph_router
from .health import router as health_router
from .retrieval import router as retrieval_router

__all__ = [
    "documents_router",
    "graph_router",
    "health_router",
    "retrieval_router",
]
