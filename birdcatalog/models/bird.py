"""
Bird Catalogue — Bird SQLAlchemy Model
========================================

What:  ORM model representing the `birds` table.
How:   Inherits from the shared DeclarativeBase; create_schema() builds it.
Who:   Used by BirdService for listing, lookup, creation and deletion, and
       joined by ListService when listing the members of a list.

Table Design:
    - UUID primary key generated on insert
    - scientific_name and sort are unique; sort defines display order across
      species and subspecies alike
    - species_id is a self reference: non-null means this row is a subspecies
      of the referenced bird. Deleting a species detaches its subspecies.
    - alternative_names is a TEXT[] on PostgreSQL and JSON elsewhere
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, ForeignKey, Index, Integer, String, Uuid, func
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import DateTime

from birdcatalog.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """created_at / updated_at columns shared by every table."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )


class Bird(TimestampMixin, Base):
    """
    A species or subspecies entry in the catalogue.

    Query Patterns:
        - List birds: ... ORDER BY sort LIMIT :per_page OFFSET :offset
        - Subspecies of a species: ... WHERE species_id = :id ORDER BY sort
        - Subspecies count: correlated count(*) WHERE species_id = birds.id
    """

    __tablename__ = "birds"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    common_name: Mapped[str] = mapped_column(String(255), nullable=False)
    scientific_name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    family_name: Mapped[str] = mapped_column(String(255), nullable=False)
    family: Mapped[str] = mapped_column(String(255), nullable=False)
    order: Mapped[str] = mapped_column(String(255), nullable=False)
    alternative_names: Mapped[Optional[List[str]]] = mapped_column(
        JSON().with_variant(postgresql.ARRAY(String(255)), "postgresql"),
        nullable=True,
    )
    sort: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    species_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("birds.id", ondelete="SET NULL"),
        nullable=True,
    )

    __table_args__ = (
        Index("idx_birds_species_id", "species_id"),
        Index("idx_birds_common_name", "common_name"),
    )

    def __repr__(self) -> str:
        return (
            f"<Bird(id={self.id}, scientific_name='{self.scientific_name}', "
            f"sort={self.sort})>"
        )
