"""
Change detection for re-ingestion.

Dependencies: knowledge_core.core.fingerprint
System role: Decides whether a document must be reprocessed
"""

from knowledge_core.core.fingerprint import document_fingerprint


def needs_reprocessing(
    new_content: str,
    stored_fingerprint: str | None,
    stored_model: str | None,
    current_model: str,
) -> bool:
    """
    Decide whether a document has to be chunked, extracted and embedded again.

    Vectors from different models are not comparable, so a model change
    invalidates the document as much as a content change does.

    Args:
        new_content: Content about to be ingested
        stored_fingerprint: Fingerprint recorded by the last completed run
        stored_model: Embedding model recorded by the last completed run
        current_model: Embedding model the pipeline is configured with

    Returns:
        bool: True when there is no fingerprint, the content differs by any
        byte, or the embedding model changed
    """
    if not stored_fingerprint:
        return True
    if document_fingerprint(new_content) != stored_fingerprint:
        return True
    return stored_model != current_model
