"""
Prompt templates for summarization and knowledge extraction.

Dependencies: langchain_core.prompts
System role: Prompt templates for the best-effort LLM stages of ingestion
"""

from langchain_core.prompts import ChatPromptTemplate

from knowledge_core.models.extraction import ENTITY_TYPES

SUMMARY_SYSTEM_PROMPT = """You are a helpful assistant that creates concise, informative summaries.
Focus on the key points, main arguments, and important details.
Keep the summary clear and well-structured."""

EXTRACTION_SYSTEM_PROMPT = f"""You are an expert at extracting structured knowledge from text.
Your task is to identify:
1. Key entities, each typed as one of: {", ".join(ENTITY_TYPES)}
2. Directed relationships between these entities

## Rules
- Only extract entities and relationships that are clearly present in the text
- Use the entity name exactly as written in the text
- Every relationship source and target MUST be the name of an extracted entity
- Relationship types are short snake_case labels such as created_by, part_of,
  related_to, used_by, built_with
- Descriptions are one short sentence, or null when the text says nothing useful"""

SUMMARY_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SUMMARY_SYSTEM_PROMPT),
    ("human", "Please summarize the following content:\n\n{content}"),
])

EXTRACTION_PROMPT = ChatPromptTemplate.from_messages([
    ("system", EXTRACTION_SYSTEM_PROMPT),
    ("human", "Extract all entities and their relationships from the following text:\n\n{content}"),
])


def get_summary_prompt() -> ChatPromptTemplate:
    """Get the summarization prompt template (variable: content)."""
    return SUMMARY_PROMPT


def get_extraction_prompt() -> ChatPromptTemplate:
    """Get the entity/relationship extraction prompt template (variable: content)."""
    return EXTRACTION_PROMPT
