"""
Language model provider adapter.

Runs the summarization and extraction prompts against a langchain chat
model. Extraction uses structured output bound to ExtractionResult, so
whatever the model returns is validated and coerced before the graph
sees it.

Dependencies: langchain_core, langchain_google_genai, langchain_aws, pydantic
System role: Text -> summary and text -> entities/relationships boundary
"""

import logging
from typing import Any, Protocol, runtime_checkable

from langchain_core.language_models import BaseChatModel
from pydantic import ValidationError as PydanticValidationError

from knowledge_core.boundary.providers.prompts import get_extraction_prompt, get_summary_prompt
from knowledge_core.configs.llm import LLMSettings
from knowledge_core.core.exceptions import ExtractionError
from knowledge_core.models import ExtractionResult

logger = logging.getLogger(__name__)


@runtime_checkable
class LanguageModelProvider(Protocol):
    """Summarization and extraction capabilities used during ingestion."""

    async def summarize(self, text: str) -> str: ...

    async def extract(self, text: str) -> ExtractionResult: ...


def _message_text(content: Any) -> str:
    """Flatten chat message content (str or list of parts) to plain text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(str(part.get("text", "")))
        return "".join(parts)
    return str(content)


class LangChainLanguageModelProvider:
    """LanguageModelProvider backed by a langchain chat model."""

    def __init__(self, chat_model: BaseChatModel) -> None:
        self._model = chat_model
        self._summary_chain = get_summary_prompt() | chat_model
        self._extraction_chain = None

    def _get_extraction_chain(self):
        if self._extraction_chain is None:
            self._extraction_chain = get_extraction_prompt() | self._model.with_structured_output(
                ExtractionResult
            )
        return self._extraction_chain

    async def summarize(self, text: str) -> str:
        """
        Summarize text.

        Args:
            text: Content to summarize (already truncated by the caller)

        Returns:
            str: Non-empty summary

        Raises:
            ExtractionError: Model call failed or returned nothing
        """
        try:
            response = await self._summary_chain.ainvoke({"content": text})
        except Exception as e:
            raise ExtractionError(
                f"Summarization failed: {type(e).__name__}: {e}",
                operation="summarize",
            ) from e

        summary = _message_text(response.content).strip()
        if not summary:
            raise ExtractionError("Summarization returned empty text", operation="summarize")
        return summary

    async def extract(self, text: str) -> ExtractionResult:
        """
        Extract entities and relationships.

        Args:
            text: Summary or truncated content

        Returns:
            ExtractionResult: Validated, coerced extraction

        Raises:
            ExtractionError: Model call failed or output did not match the schema
        """
        try:
            output = await self._get_extraction_chain().ainvoke({"content": text})
        except Exception as e:
            raise ExtractionError(
                f"Extraction failed: {type(e).__name__}: {e}",
                operation="extract",
            ) from e

        if isinstance(output, ExtractionResult):
            return output
        if output is None:
            raise ExtractionError("Extraction returned no structured output", operation="extract")
        try:
            return ExtractionResult.model_validate(output)
        except PydanticValidationError as e:
            raise ExtractionError(
                "Extraction output did not match schema",
                operation="extract",
                details={"errors": e.error_count()},
            ) from e


def build_language_model_provider(settings: LLMSettings) -> LangChainLanguageModelProvider:
    """
    Create the chat-model provider selected by settings.

    Args:
        settings: LLM settings (provider, model, region, temperature)

    Returns:
        LangChainLanguageModelProvider

    Raises:
        ValueError: Unknown provider name
    """
    provider = settings.provider.lower()

    if provider == "google":
        from langchain_google_genai import ChatGoogleGenerativeAI

        chat_model = ChatGoogleGenerativeAI(
            model=settings.model,
            temperature=settings.temperature,
        )
    elif provider == "bedrock":
        from langchain_aws import ChatBedrockConverse

        chat_model = ChatBedrockConverse(
            model=settings.model,
            region_name=settings.region,
            temperature=settings.temperature,
        )
    else:
        raise ValueError(f"Unknown LLM provider: {settings.provider}")

    logger.info(f"{__name__}:build_language_model_provider - Using {provider} model={settings.model}")
    return LangChainLanguageModelProvider(chat_model)
