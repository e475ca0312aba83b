"""
Schema for summarization/extraction provider output.

The language model is asked for this exact shape via structured output,
and everything it returns is validated and coerced here before it can
reach the graph: unknown entity types become "other", relation labels
are normalised to snake_case, names and labels are cut to their column
widths, and entries with blank names are dropped.

Dependencies: pydantic
System role: Validated boundary between LLM output and graph upsert
"""

import re
from typing import Any

from pydantic import BaseModel, Field, field_validator

ENTITY_TYPES: tuple[str, ...] = (
    "person",
    "concept",
    "technology",
    "organization",
    "location",
    "event",
    "product",
    "other",
)

DEFAULT_RELATION_TYPE = "related_to"

# Column widths of entities.name and relationships.relation_type
MAX_NAME_LENGTH = 512
MAX_RELATION_TYPE_LENGTH = 128
MAX_DESCRIPTION_LENGTH = 2000

_NON_WORD = re.compile(r"[\W_]+")


def _clean_name(value: Any) -> str:
    return str(value or "").strip()[:MAX_NAME_LENGTH].rstrip()


def _clean_description(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()[:MAX_DESCRIPTION_LENGTH].rstrip()
    return text or None


def _name_of(item: Any, key: str) -> str:
    if isinstance(item, BaseModel):
        value = getattr(item, key, "")
    elif isinstance(item, dict):
        value = item.get(key, "")
    else:
        return ""
    return str(value or "").strip()


class ExtractedEntity(BaseModel):
    """Entity mentioned in a document."""

    name: str = Field(description="Entity name as written in the text")
    type: str = Field(
        default="other",
        description="One of: " + ", ".join(ENTITY_TYPES),
    )
    description: str | None = Field(default=None, description="One-sentence description")

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> str:
        return _clean_name(value)

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> str:
        normalized = str(value or "").strip().lower()
        return normalized if normalized in ENTITY_TYPES else "other"

    @field_validator("description", mode="before")
    @classmethod
    def _strip_description(cls, value: Any) -> str | None:
        return _clean_description(value)

    @property
    def key(self) -> tuple[str, str]:
        return (self.name, self.type)


class ExtractedRelationship(BaseModel):
    """Directed relationship between two extracted entities, by name."""

    source: str = Field(description="Name of the source entity")
    target: str = Field(description="Name of the target entity")
    type: str = Field(
        default=DEFAULT_RELATION_TYPE,
        description="Relation label in snake_case, e.g. works_at, built_with",
    )
    description: str | None = Field(default=None, description="Short description of the relation")

    @field_validator("source", "target", mode="before")
    @classmethod
    def _strip_endpoint(cls, value: Any) -> str:
        return _clean_name(value)

    @field_validator("type", mode="before")
    @classmethod
    def _snake_case(cls, value: Any) -> str:
        normalized = _NON_WORD.sub("_", str(value or "").strip().lower())
        normalized = normalized[:MAX_RELATION_TYPE_LENGTH].strip("_")
        return normalized or DEFAULT_RELATION_TYPE

    @field_validator("description", mode="before")
    @classmethod
    def _strip_description(cls, value: Any) -> str | None:
        return _clean_description(value)


class ExtractionResult(BaseModel):
    """Entities and relationships extracted from one document."""

    entities: list[ExtractedEntity] = Field(default_factory=list)
    relationships: list[ExtractedRelationship] = Field(default_factory=list)

    @field_validator("entities", mode="before")
    @classmethod
    def _drop_blank_entities(cls, value: Any) -> list[Any]:
        if value is None:
            return []
        return [item for item in value if _name_of(item, "name")]

    @field_validator("relationships", mode="before")
    @classmethod
    def _drop_blank_relationships(cls, value: Any) -> list[Any]:
        if value is None:
            return []
        return [
            item
            for item in value
            if _name_of(item, "source") and _name_of(item, "target")
        ]

    @classmethod
    def empty(cls) -> "ExtractionResult":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.entities and not self.relationships
