"""
Rating CRUD Operations
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from uniyelp.core.errors import Conflict, StoreFailure
from uniyelp.models.base import slugify
from uniyelp.models.rating import Rating, RatingCategory
from uniyelp.schemas.rating import RatingCategoryCreate, RatingCategoryUpdate
from uniyelp.services.rating_attacher import RATING_LINKS, RatableEntity

logger = logging.getLogger(__name__)


def get_categories(db: Session) -> List[RatingCategory]:
    return db.query(RatingCategory).order_by(RatingCategory.name).all()


def get_category(db: Session, category_id: str) -> Optional[RatingCategory]:
    return db.query(RatingCategory).filter(RatingCategory.id == category_id).first()


def get_category_by_slug(db: Session, slug: str) -> Optional[RatingCategory]:
    return db.query(RatingCategory).filter(RatingCategory.slug == slug).first()


def create_category(db: Session, data: RatingCategoryCreate, user_id: str) -> RatingCategory:
    slug = slugify(data.name)
    if get_category_by_slug(db, slug):
        raise Conflict(f"Rating category '{slug}' already exists")

    values = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    category = RatingCategory(slug=slug, created_by_id=user_id, updated_by_id=user_id, **values)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def update_category(
    db: Session,
    category_id: str,
    data: RatingCategoryUpdate,
    user_id: str
) -> Optional[RatingCategory]:
    category = get_category(db, category_id)
    if not category:
        return None

    for field, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(category, field, value)
    category.updated_by_id = user_id

    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: str) -> bool:
    """
    Delete an unused category.

    Raises:
        Conflict: ratings still reference the category
        StoreFailure: the delete failed in the database
    """
    category = get_category(db, category_id)
    if not category:
        return False

    in_use = db.query(Rating).filter(Rating.rating_category_id == category_id).count()
    if in_use:
        raise Conflict(f"Rating category '{category.slug}' is used by {in_use} rating(s); deactivate it instead")

    try:
        db.delete(category)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Deleting rating category %s failed", category_id, exc_info=True)
        raise StoreFailure("Failed to delete rating category") from exc
    return True


def get_entity_ratings(
    db: Session,
    entity_type: RatableEntity,
    entity_id: str,
    skip: int = 0,
    limit: int = 50
) -> Tuple[List[Rating], int]:
    """Ratings linked to one entity, newest first"""
    model, column = RATING_LINKS[entity_type]
    query = db.query(Rating).join(model, model.rating_id == Rating.id).filter(
        getattr(model, column) == entity_id
    )
    total = query.count()
    ratings = query.order_by(desc(Rating.created_at)).offset(skip).limit(limit).all()
    return ratings, total
