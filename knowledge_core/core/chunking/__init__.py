"""Structure-aware document chunking."""

from knowledge_core.core.chunking.structured_chunker import (
    StructuredChunker,
    dedupe_segments,
    estimate_tokens,
)

__all__ = ["StructuredChunker", "dedupe_segments", "estimate_tokens"]
