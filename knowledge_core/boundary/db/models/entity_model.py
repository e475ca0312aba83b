"""
Entity ORM model.

Knowledge graph node, unique on (name, type) and shared across documents.

Dependencies: sqlalchemy, knowledge_core.boundary.db.base
System role: Graph node persistence
"""

from sqlalchemy import Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from knowledge_core.boundary.db.base import Base, TimestampMixin, UUIDMixin, VectorType


class EntityModel(Base, UUIDMixin, TimestampMixin):
    """
    Entity ORM model.

    The (name, type) pair is the natural key: "Python" the technology and
    "Python" the concept are two different rows.

    Attributes:
        name: Entity name as extracted
        type: Entity category (person, concept, technology, ...)
        description: Optional free-text description
        embedding: Graph-purpose vector as a JSON float array (optional)
    """

    __tablename__ = "entities"
    __table_args__ = (
        UniqueConstraint("name", "type", name="entities_name_type_uq"),
        Index("entities_type_idx", "type"),
    )

    name: Mapped[str] = mapped_column(String(512), nullable=False)

    type: Mapped[str] = mapped_column(String(64), nullable=False)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    embedding: Mapped[list[float] | None] = mapped_column(VectorType, nullable=True)
