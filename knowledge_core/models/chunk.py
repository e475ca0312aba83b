"""
Chunk segment model produced by the chunker.

Dependencies: pydantic
System role: Data structure for document segments before persistence
"""

from pydantic import BaseModel, Field


class ChunkSegment(BaseModel):
    """Bounded text segment of a document."""

    index: int = Field(description="Position in the chunker output")
    content: str = Field(description="Whitespace-normalised segment text")
    token_count: int = Field(description="Estimated token count")
    content_hash: str = Field(description="SHA-256 fingerprint of the segment text")
