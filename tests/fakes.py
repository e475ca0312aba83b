"""
Deterministic test doubles for the embedding and language model providers.
"""

import asyncio
import hashlib
import math
from typing import Callable

from knowledge_core.core.exceptions import EmbeddingError, ExtractionError
from knowledge_core.models import ExtractionResult

TEST_MODEL = "test-embedding-model"


def hashed_vector(text: str, dimension: int = 8) -> list[float]:
    """Deterministic pseudo-embedding derived from the text's SHA-256."""
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    return [(digest[i] / 255.0) - 0.5 for i in range(dimension)]


class FakeEmbeddingProvider:
    """
    In-memory embedding provider.

    Records every call, returns configured vectors (or hashed ones), and
    fails any batch for which `fail_when` returns True.
    """

    def __init__(
        self,
        vectors: dict[str, list[float]] | None = None,
        fail_when: Callable[[list[str]], bool] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.vectors = vectors or {}
        self.fail_when = fail_when
        self.delay = delay
        self.calls: list[list[str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def embedded_texts(self) -> list[str]:
        return [text for call in self.calls for text in call]

    async def embed_batch(self, texts: list[str], model: str) -> list[list[float]]:
        self.calls.append(list(texts))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.fail_when is not None and self.fail_when(texts):
                raise EmbeddingError("provider unavailable", batch_size=len(texts))
            return [self.vectors.get(text, hashed_vector(text)) for text in texts]
        finally:
            self.in_flight -= 1


class FakeLanguageModelProvider:
    """Language model provider returning canned output, or raising when told to."""

    def __init__(
        self,
        summary: str | None = "A short summary.",
        extraction: ExtractionResult | None = None,
        fail_summary: bool = False,
        fail_extraction: bool = False,
    ) -> None:
        self.summary = summary
        self.extraction = extraction or ExtractionResult()
        self.fail_summary = fail_summary
        self.fail_extraction = fail_extraction
        self.summarize_calls: list[str] = []
        self.extract_calls: list[str] = []

    async def summarize(self, text: str) -> str:
        self.summarize_calls.append(text)
        if self.fail_summary:
            raise ExtractionError("summary model down", operation="summarize")
        return self.summary

    async def extract(self, text: str) -> ExtractionResult:
        self.extract_calls.append(text)
        if self.fail_extraction:
            raise ExtractionError("extraction model down", operation="extract")
        return self.extraction


def unit_vector(similarity: float) -> list[float]:
    """2-d unit vector whose cosine similarity to [1, 0] is `similarity`."""
    return [similarity, math.sqrt(max(0.0, 1.0 - similarity * similarity))]




async def create_document(session, content: str, title: str = "Test document"):
    """Persist a PENDING document and return it."""
    from knowledge_core.boundary.db.CRUD import document_crud

    return await document_crud.create(session, title=title, content=content)


def alpha_beta_extraction() -> ExtractionResult:
    """Two technologies and one edge between them."""
    return ExtractionResult(
        entities=[
            {"name": "Alpha", "type": "technology", "description": "First system"},
            {"name": "Beta", "type": "technology", "description": "Second system"},
        ],
        relationships=[{"source": "Alpha", "target": "Beta", "type": "depends on"}],
    )


class FakeContentFetcher:
    """ContentFetcher serving pages from a dict; unknown URLs fail."""

    def __init__(self, pages: dict[str, tuple[str, str]] | None = None) -> None:
        self.pages = pages or {}
        self.fetched: list[str] = []

    async def fetch(self, url: str):
        from knowledge_core.core.exceptions import ContentFetchError
        from knowledge_core.models import FetchedContent

        self.fetched.append(url)
        if url not in self.pages:
            raise ContentFetchError("page unavailable", url=url)
        title, content = self.pages[url]
        return FetchedContent(title=title, content=content, source_url=url)
