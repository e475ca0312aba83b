"""Core ingestion and retrieval logic."""
