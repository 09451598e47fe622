"""
Bird Catalogue — List and Membership SQLAlchemy Models
========================================================

What:  ORM models for the `lists` and `list_birds` tables.
Who:   Used by ListService.

Table Design:
    lists:
        - UUID primary key, unique name, free-text description
    list_birds (one row per bird included in a list):
        - (list_id, bird_id) is the primary key, so a bird appears at most
          once per list; a duplicate insert fails with a unique violation
        - local_name overrides the bird's common name inside this list
        - sort is the display position; unique across all memberships
        - rows disappear together with their list or bird (ON DELETE CASCADE)
"""

import uuid
from typing import Optional

from sqlalchemy import ForeignKey, Integer, PrimaryKeyConstraint, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from birdcatalog.database import Base
from birdcatalog.models.bird import TimestampMixin


class BirdList(TimestampMixin, Base):
    """A named, curated collection of birds (e.g. a regional checklist)."""

    __tablename__ = "lists"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<BirdList(id={self.id}, name='{self.name}')>"


class ListBird(TimestampMixin, Base):
    """Membership of one bird in one list."""

    __tablename__ = "list_birds"

    list_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("lists.id", ondelete="CASCADE"),
        nullable=False,
    )
    bird_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("birds.id", ondelete="CASCADE"),
        nullable=False,
    )
    local_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    sort: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)

    __table_args__ = (
        PrimaryKeyConstraint("list_id", "bird_id", name="pk_list_birds"),
    )

    def __repr__(self) -> str:
        return (
            f"<ListBird(list_id={self.list_id}, bird_id={self.bird_id}, "
            f"sort={self.sort})>"
        )
