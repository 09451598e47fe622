"""
Bird Catalogue — Bird Service
===============================

What:  Reads, creates and deletes birds, including the species/subspecies
       hierarchy.
How:   Builds SQLAlchemy select/insert/delete statements and maps each row
       to a BirdResponse through an explicit field-by-field constructor.
Who:   Called by the /birds route handlers.

Subspecies counting:
    Every listed bird carries `subspecies`, computed by a correlated
    subquery:

        SELECT birds.*,
               (SELECT count(child.id) FROM birds AS child
                 WHERE child.species_id = birds.id) AS subspecies
          FROM birds
         ORDER BY birds.sort

    A species gets the number of rows pointing at it; a subspecies gets 0.

Filtering:
    query            case-insensitive prefix match on common_name
    scientific_name  case-insensitive ILIKE pattern on scientific_name; % and _
                     are wildcards, so "aquila%" matches the genus
"""

import logging
import uuid
from typing import Any, List, Mapping, Optional, Union

from sqlalchemy import Select, delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from birdcatalog.exceptions import DatabaseError, ValidationError
from birdcatalog.models.bird import Bird
from birdcatalog.pagination import page_offset
from birdcatalog.schemas.bird import BirdCreate, BirdResponse
from birdcatalog.services.base import parse_id, translate_write_error, validate_payload

logger = logging.getLogger(__name__)


def subspecies_count_column():
    """Correlated scalar subquery counting the rows that reference birds.id."""
    child = aliased(Bird)
    return (
        select(func.count(child.id))
        .where(child.species_id == Bird.id)
        .correlate(Bird)
        .scalar_subquery()
        .label("subspecies")
    )


def to_bird_response(bird: Bird, subspecies: int = 0) -> BirdResponse:
    """Storage row → wire representation."""
    return BirdResponse(
        id=bird.id,
        common_name=bird.common_name,
        scientific_name=bird.scientific_name,
        family_name=bird.family_name,
        family=bird.family,
        order=bird.order,
        alternative_names=list(bird.alternative_names) if bird.alternative_names is not None else None,
        sort=bird.sort,
        species_id=bird.species_id,
        subspecies=int(subspecies or 0),
        created_at=bird.created_at,
        updated_at=bird.updated_at,
    )


class BirdService:
    """
    Business logic layer for bird operations.

    Responsibilities:
        - all() / count():                     filtered, paginated listing
        - subspecies() / count_subspecies():   subspecies of one species
        - find():                              single lookup, None when absent
        - create():                            validate, insert, re-read
        - delete():                            idempotent delete by id

    Database errors on reads are wrapped in DatabaseError; write errors are
    split into ConflictError (unique violation) and DatabaseError.
    """

    @staticmethod
    def _apply_filters(
        stmt: Select,
        query: Optional[str] = None,
        scientific_name: Optional[str] = None,
    ) -> Select:
        if query:
            stmt = stmt.where(Bird.common_name.istartswith(query, autoescape=True))
        if scientific_name:
            stmt = stmt.where(Bird.scientific_name.ilike(scientific_name))
        return stmt

    async def _fetch(self, db: AsyncSession, stmt: Select, action: str) -> List[BirdResponse]:
        try:
            result = await db.execute(stmt)
            return [to_bird_response(bird, count) for bird, count in result.all()]
        except SQLAlchemyError as e:
            logger.error("Database error %s: %s", action, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve birds. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

    async def _scalar(self, db: AsyncSession, stmt: Select, action: str) -> int:
        try:
            result = await db.execute(stmt)
            return int(result.scalar() or 0)
        except SQLAlchemyError as e:
            logger.error("Database error %s: %s", action, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not count birds. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

    # ── Listing ───────────────────────────────────────────────────────────

    async def all(
        self,
        db: AsyncSession,
        query: Optional[str] = None,
        scientific_name: Optional[str] = None,
        page: int = 1,
        per_page: int = 20,
    ) -> List[BirdResponse]:
        """
        List species and subspecies ordered by sort.

        perPage = 0 returns an empty list.
        """
        stmt = self._apply_filters(
            select(Bird, subspecies_count_column()),
            query=query,
            scientific_name=scientific_name,
        )
        stmt = (
            stmt.order_by(Bird.sort.asc())
            .limit(per_page)
            .offset(page_offset(page, per_page))
        )
        return await self._fetch(db, stmt, "listing birds")

    async def count(
        self,
        db: AsyncSession,
        query: Optional[str] = None,
        scientific_name: Optional[str] = None,
    ) -> int:
        """Total birds matching the filters, ignoring pagination."""
        stmt = self._apply_filters(
            select(func.count(Bird.id)),
            query=query,
            scientific_name=scientific_name,
        )
        return await self._scalar(db, stmt, "counting birds")

    async def subspecies(
        self,
        db: AsyncSession,
        species_id: Union[str, uuid.UUID],
        page: int = 1,
        per_page: int = 20,
    ) -> List[BirdResponse]:
        """Subspecies of one species, ordered by sort."""
        parent_id = parse_id(species_id)
        if parent_id is None:
            return []
        stmt = (
            select(Bird, subspecies_count_column())
            .where(Bird.species_id == parent_id)
            .order_by(Bird.sort.asc())
            .limit(per_page)
            .offset(page_offset(page, per_page))
        )
        return await self._fetch(db, stmt, "listing subspecies")

    async def count_subspecies(self, db: AsyncSession, species_id: Union[str, uuid.UUID]) -> int:
        parent_id = parse_id(species_id)
        if parent_id is None:
            return 0
        stmt = select(func.count(Bird.id)).where(Bird.species_id == parent_id)
        return await self._scalar(db, stmt, "counting subspecies")

    # ── Single Resource ───────────────────────────────────────────────────

    async def find(self, db: AsyncSession, bird_id: Union[str, uuid.UUID]) -> Optional[BirdResponse]:
        """
        Look up one bird by id.

        Returns None when no bird has that id (including ids that are not
        UUIDs). Database failures raise DatabaseError.
        """
        parsed = parse_id(bird_id)
        if parsed is None:
            return None
        stmt = select(Bird, subspecies_count_column()).where(Bird.id == parsed)
        birds = await self._fetch(db, stmt, f"fetching bird {parsed}")
        return birds[0] if birds else None

    async def create(
        self,
        db: AsyncSession,
        payload: Union[BirdCreate, Mapping[str, Any]],
    ) -> BirdResponse:
        """
        Validate and insert a bird, then return the stored row.

        Workflow:
            1. Validate the payload (ValidationError, no storage access)
            2. When speciesId is given, check it names an existing species
            3. INSERT; unique violations become ConflictError
            4. Re-read the row so id, timestamps and counts are included
        """
        data = validate_payload(BirdCreate, payload)

        if data.species_id is not None:
            await self._check_parent(db, data.species_id)

        bird = Bird(
            common_name=data.common_name,
            scientific_name=data.scientific_name,
            family_name=data.family_name,
            family=data.family,
            order=data.order,
            alternative_names=data.alternative_names,
            sort=data.sort,
            species_id=data.species_id,
        )
        db.add(bird)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            raise translate_write_error(
                e,
                conflict_message=(
                    f"A bird with scientificName '{data.scientific_name}' "
                    f"or sort {data.sort} already exists"
                ),
                context={"scientific_name": data.scientific_name, "sort": data.sort},
            ) from e

        logger.info("Bird created: %s (%s)", bird.id, bird.scientific_name)
        return await self.find(db, bird.id)

    async def _check_parent(self, db: AsyncSession, species_id: uuid.UUID) -> None:
        """A subspecies must reference an existing bird that is itself a species."""
        parent = await self.find(db, species_id)
        if parent is None:
            raise ValidationError(
                message=f"speciesId '{species_id}' does not reference an existing bird",
                field="speciesId",
            )
        if parent.species_id is not None:
            raise ValidationError(
                message=f"speciesId '{species_id}' references a subspecies; it must reference a species",
                field="speciesId",
            )

    async def delete(self, db: AsyncSession, bird_id: Union[str, uuid.UUID]) -> int:
        """Delete by id. Returns the number of rows removed (0 or 1)."""
        parsed = parse_id(bird_id)
        if parsed is None:
            return 0
        try:
            result = await db.execute(delete(Bird).where(Bird.id == parsed))
        except SQLAlchemyError as e:
            logger.error("Database error deleting bird %s: %s", parsed, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the bird. Please try again.",
                context={"bird_id": str(parsed)},
            ) from e
        if result.rowcount:
            logger.info("Bird deleted: %s", parsed)
        return result.rowcount


# ── Singleton Instance ────────────────────────────────────────────────────
bird_service = BirdService()
