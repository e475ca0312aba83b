"""Document ingestion pipeline."""

from knowledge_core.core.ingestion.change_detector import needs_reprocessing
from knowledge_core.core.ingestion.pipeline import EMBEDDING_VERSION, IngestionPipeline

__all__ = ["EMBEDDING_VERSION", "IngestionPipeline", "needs_reprocessing"]
