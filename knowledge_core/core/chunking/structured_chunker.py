"""
Structure-aware chunking task using RecursiveCharacterTextSplitter.

Splits document text at markdown headings first, then blank-line
paragraphs, then sentences, then words, packing neighbouring pieces up to
the target token budget. Pieces left below the minimum budget are folded
into a neighbour when the result stays within the maximum budget. Token
counts are estimated from a fixed chars-per-token ratio; no tokenizer is
loaded.

Dependencies: langchain_text_splitters, knowledge_core.models
System role: First stage of document ingestion pipeline
"""

import math

from langchain_text_splitters import RecursiveCharacterTextSplitter

from knowledge_core.configs import PipelineConfig
from knowledge_core.core.fingerprint import chunk_fingerprint, normalize_whitespace
from knowledge_core.models import ChunkSegment

# Coarsest boundary first; "" lets a single over-long word be cut.
STRUCTURAL_SEPARATORS = [
    r"\n(?=#{1,6}\s)",
    r"\n\s*\n",
    r"(?<=[.!?])\s+",
    r"\s+",
    "",
]


def estimate_tokens(text: str, chars_per_token: int = 4) -> int:
    """Approximate token count as ceil(len / chars_per_token)."""
    return math.ceil(len(text) / chars_per_token)


def dedupe_segments(segments: list[ChunkSegment]) -> tuple[list[ChunkSegment], int]:
    """
    Collapse segments with equal fingerprints, keeping the first occurrence.

    Surviving segments are re-indexed contiguously.

    Args:
        segments: Chunker output

    Returns:
        tuple: (unique segments, number of duplicates removed)
    """
    seen: set[str] = set()
    unique: list[ChunkSegment] = []
    for segment in segments:
        if segment.content_hash in seen:
            continue
        seen.add(segment.content_hash)
        unique.append(segment.model_copy(update={"index": len(unique)}))
    return unique, len(segments) - len(unique)


class StructuredChunker:
    """Split text into bounded, structure-aligned segments."""

    def __init__(
        self,
        min_tokens: int = 100,
        target_tokens: int = 500,
        max_tokens: int = 800,
        chars_per_token: int = 4,
    ) -> None:
        """
        Initialize chunker with token budgets.

        Args:
            min_tokens: Segments below this are folded into a neighbour
            target_tokens: Splitter packs pieces up to this size
            max_tokens: No segment is ever larger than this
            chars_per_token: Character-to-token ratio for estimates
        """
        self._min_tokens = min_tokens
        self._max_tokens = max_tokens
        self._chars_per_token = chars_per_token
        self._splitter = RecursiveCharacterTextSplitter(
            separators=STRUCTURAL_SEPARATORS,
            is_separator_regex=True,
            keep_separator=True,
            chunk_size=target_tokens,
            chunk_overlap=0,
            length_function=self._tokens,
        )

    @classmethod
    def from_config(cls, config: PipelineConfig) -> "StructuredChunker":
        return cls(
            min_tokens=config.min_chunk_tokens,
            target_tokens=config.target_chunk_tokens,
            max_tokens=config.max_chunk_tokens,
            chars_per_token=config.chars_per_token,
        )

    def chunk(self, text: str) -> list[ChunkSegment]:
        """
        Split text into ordered segments.

        Args:
            text: Raw document text

        Returns:
            list[ChunkSegment]: Segments with index, token estimate and
            fingerprint. Empty input yields an empty list.
        """
        if not text or not text.strip():
            return []

        segments: list[ChunkSegment] = []
        for piece in self._fold_small(self._splitter.split_text(text)):
            content = normalize_whitespace(piece)
            if not content:
                continue
            segments.append(
                ChunkSegment(
                    index=len(segments),
                    content=content,
                    token_count=self._tokens(content),
                    content_hash=chunk_fingerprint(content),
                )
            )
        return segments

    def _tokens(self, text: str) -> int:
        return estimate_tokens(text, self._chars_per_token)

    def _fold_small(self, pieces: list[str]) -> list[str]:
        folded: list[str] = []
        for piece in pieces:
            if folded and min(self._tokens(folded[-1]), self._tokens(piece)) < self._min_tokens:
                combined = f"{folded[-1]}\n\n{piece}"
                if self._tokens(combined) <= self._max_tokens:
                    folded[-1] = combined
                    continue
            # No room: an undersized piece stands on its own
            folded.append(piece)
        return folded
