"""
Content fingerprints.

Dependencies: hashlib (stdlib)
System role: Deterministic hashing for dedup, change detection and cache keys
"""

import hashlib
import re

_WHITESPACE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Trim and collapse every whitespace run to a single space."""
    return _WHITESPACE.sub(" ", text.strip())


def sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def document_fingerprint(content: str) -> str:
    """
    Fingerprint of raw document content.

    Hashes the exact UTF-8 bytes, so any one-byte change yields a new value.
    """
    return sha256_hex(content)


def chunk_fingerprint(text: str) -> str:
    """Fingerprint of a chunk's normalised text."""
    return sha256_hex(normalize_whitespace(text))


def embedding_cache_key(text: str) -> str:
    """
    Cache key for an embedding input.

    Whitespace differences do not change the key; case does.
    """
    return sha256_hex(normalize_whitespace(text))
