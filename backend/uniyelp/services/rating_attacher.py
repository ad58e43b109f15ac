"""
Rating Attacher - create a rating and link it to the rated entity

A rating row always comes with exactly one link row, in the junction table of
the entity type it rates. Both inserts happen on the caller's transaction:

    with transaction(db) as tx:
        rating_id = attach(tx, principal.id, "college", college_id, category_id, "4")
"""
import logging
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from uniyelp.core.errors import InvalidDiscriminator, StoreFailure
from uniyelp.models.base import generate_id
from uniyelp.models.rating import (
    CollegeRating,
    CourseRating,
    DepartmentRating,
    ProgramRating,
    Rating,
    UniversityRating,
)

logger = logging.getLogger(__name__)


class RatableEntity(str, Enum):
    UNIVERSITY = "university"
    COLLEGE = "college"
    DEPARTMENT = "department"
    PROGRAM = "program"
    COURSE = "course"

    @classmethod
    def parse(cls, value: Union["RatableEntity", str]) -> "RatableEntity":
        """Parse an externally supplied entity type."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidDiscriminator(value) from None


# entity type -> (junction model, entity id column)
RATING_LINKS: Dict[RatableEntity, Tuple[type, str]] = {
    RatableEntity.UNIVERSITY: (UniversityRating, "university_id"),
    RatableEntity.COLLEGE: (CollegeRating, "college_id"),
    RatableEntity.DEPARTMENT: (DepartmentRating, "department_id"),
    RatableEntity.PROGRAM: (ProgramRating, "program_id"),
    RatableEntity.COURSE: (CourseRating, "course_id"),
}


def link_for(entity_type: RatableEntity, entity_id: str, rating_id: str):
    model, column = RATING_LINKS[entity_type]
    return model(**{column: entity_id, "rating_id": rating_id})


def attach(
    tx: Session,
    principal_id: str,
    entity_type: Union[RatableEntity, str],
    entity_id: str,
    category_id: str,
    value: str,
    review: Optional[str] = None,
) -> str:
    """
    Insert a rating by ``principal_id`` and link it to ``entity_id``.

    Must run inside ``transaction(...)`` so a failure leaves neither row.

    Returns:
        the new rating id

    Raises:
        InvalidDiscriminator: ``entity_type`` is not a ratable entity
        StoreFailure: any error from the database layer
    """
    entity = RatableEntity.parse(entity_type)
    rating_id = generate_id()

    try:
        tx.add(Rating(
            id=rating_id,
            user_id=principal_id,
            rating_category_id=category_id,
            value=value,
            review=review,
            is_verified=False,
        ))
        tx.flush()
        tx.add(link_for(entity, entity_id, rating_id))
        tx.flush()
    except SQLAlchemyError as exc:
        logger.error("Attaching rating to %s %s failed", entity.value, entity_id, exc_info=True)
        raise StoreFailure("Failed to store rating") from exc

    logger.info("User %s rated %s %s (rating %s)", principal_id, entity.value, entity_id, rating_id)
    return rating_id
