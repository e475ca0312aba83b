"""
Content acquisition adapter.

Fetches a web page with langchain_community's WebBaseLoader and returns
its title and text. Any failure is terminal for the ingestion that asked.

Dependencies: langchain_community, beautifulsoup4, fastapi.concurrency
System role: url -> title + text boundary
"""

import logging
from typing import Protocol, runtime_checkable

from fastapi.concurrency import run_in_threadpool
from langchain_community.document_loaders import WebBaseLoader

from knowledge_core.core.exceptions import ContentFetchError
from knowledge_core.models import FetchedContent
from knowledge_core.models.content import MAX_TITLE_LENGTH

logger = logging.getLogger(__name__)


@runtime_checkable
class ContentFetcher(Protocol):
    """Anything that turns a source locator into text."""

    async def fetch(self, url: str) -> FetchedContent: ...


class WebContentFetcher:
    """ContentFetcher for http(s) pages."""

    def __init__(self, requests_kwargs: dict | None = None) -> None:
        self._requests_kwargs = requests_kwargs or {"timeout": 30}

    async def fetch(self, url: str) -> FetchedContent:
        """
        Download and extract a page.

        Args:
            url: Page URL

        Returns:
            FetchedContent: Page title (URL when missing, cut to the title
            column width) and text

        Raises:
            ContentFetchError: Download failed or page has no text
        """
        if not url or not url.startswith(("http://", "https://")):
            raise ContentFetchError("Only http(s) URLs can be fetched", url=url)

        try:
            loader = WebBaseLoader(url, requests_kwargs=self._requests_kwargs)
            documents = await run_in_threadpool(loader.load)
        except Exception as e:
            raise ContentFetchError(
                f"Failed to fetch content: {type(e).__name__}: {e}",
                url=url,
            ) from e

        content = "\n\n".join(
            doc.page_content.strip() for doc in documents if doc.page_content.strip()
        )
        if not content:
            raise ContentFetchError("Fetched page contains no text", url=url)

        title = ""
        if documents:
            title = str(documents[0].metadata.get("title") or "").strip()

        logger.info(
            f"{__name__}:fetch - Fetched {len(content)} chars",
            extra={"url": url},
        )
        title = (title or url)[:MAX_TITLE_LENGTH].rstrip()
        return FetchedContent(title=title, content=content, source_url=url)
