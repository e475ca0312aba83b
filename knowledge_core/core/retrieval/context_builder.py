"""
Prompt context rendering for retrieved knowledge.

Dependencies: knowledge_core.models
System role: Turns a RetrievalResult into an LLM-ready text block
"""

from knowledge_core.models import RetrievalResult


def build_prompt_context(result: RetrievalResult) -> str:
    """
    Render retrieved chunks, graph context and entities as markdown.

    Args:
        result: Output of HybridRetriever.retrieve

    Returns:
        str: Prompt block; empty string when nothing was retrieved
    """
    parts: list[str] = []

    if result.chunks:
        parts.append("## Relevant Content from Knowledge Base:\n")
        for chunk in result.chunks:
            parts.append(f'### From "{chunk.document_title}":\n{chunk.content}\n')

    if result.graph_context:
        parts.append(f"\n## {result.graph_context}\n")

    if result.entities:
        parts.append("\n## Relevant Entities:\n")
        for entity in result.entities:
            line = f"- **{entity.name}** ({entity.type})"
            if entity.description:
                line += f": {entity.description}"
            parts.append(line)

    return "\n".join(parts)
