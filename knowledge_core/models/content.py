"""
Fetched content model.

Dependencies: pydantic
System role: Return type of content acquisition
"""

from pydantic import BaseModel, Field

# Width of documents.title
MAX_TITLE_LENGTH = 512


class FetchedContent(BaseModel):
    """Title and text acquired from a source locator."""

    title: str = Field(description="Document title (falls back to the URL)")
    content: str = Field(description="Extracted plain text")
    source_url: str | None = Field(default=None, description="Locator the content came from")
