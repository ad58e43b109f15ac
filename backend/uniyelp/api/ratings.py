"""
Ratings API - rating categories and rating submission
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from uniyelp.api.deps import authorize
from uniyelp.auth.policies import require_auth, require_role
from uniyelp.core.database import get_db, transaction
from uniyelp.core.errors import NotFound
from uniyelp.crud import rating as crud
from uniyelp.schemas.auth import Principal, Role
from uniyelp.schemas.rating import (
    RatingCategoryCreate,
    RatingCategoryResponse,
    RatingCategoryUpdate,
    RatingCreate,
    RatingResponse,
)
from uniyelp.services.rating_attacher import RatableEntity, attach

router = APIRouter(tags=["ratings"])

require_admin = authorize(require_role(Role.ADMIN))


@router.get("/categories")
def list_categories(db: Session = Depends(get_db)):
    categories = crud.get_categories(db)
    return {
        "success": True,
        "data": [RatingCategoryResponse.model_validate(c).model_dump() for c in categories],
    }


@router.get("/categories/slug/{slug}")
def get_category_by_slug(slug: str, db: Session = Depends(get_db)):
    category = crud.get_category_by_slug(db, slug)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return {"success": True, "data": RatingCategoryResponse.model_validate(category).model_dump()}


@router.get("/categories/{id}")
def get_category(id: str, db: Session = Depends(get_db)):
    category = crud.get_category(db, id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return {"success": True, "data": RatingCategoryResponse.model_validate(category).model_dump()}


@router.post("")
def create_rating(
    body: RatingCreate,
    principal: Principal = Depends(authorize(require_auth)),
    db: Session = Depends(get_db)
):
    """
    Rate a university, college, department, program or course.

    The rating and its link to the entity are written together; an unknown
    ``entityType`` is rejected with 400 and nothing is stored.
    """
    entity_type = RatableEntity.parse(body.entity_type)
    if not crud.get_category(db, body.category_id):
        raise NotFound(f"Rating category {body.category_id} not found")

    with transaction(db) as tx:
        rating_id = attach(
            tx,
            principal.id,
            entity_type,
            body.entity_id,
            body.category_id,
            body.rating,
            body.review,
        )
    return {"success": True, "data": {"id": rating_id}}


@router.get("")
def list_ratings(
    entity_type: str = Query(..., alias="entityType"),
    entity_id: str = Query(..., alias="entityId"),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=100, alias="pageSize"),
    db: Session = Depends(get_db)
):
    entity = RatableEntity.parse(entity_type)
    ratings, total = crud.get_entity_ratings(db, entity, entity_id, skip=(page - 1) * page_size, limit=page_size)
    return {
        "success": True,
        "data": {
            "total": total,
            "items": [RatingResponse.model_validate(r).model_dump() for r in ratings],
        },
    }


# =============================================================================
# Admin
# =============================================================================

@router.post("/admin/categories")
def create_category(
    body: RatingCategoryCreate,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db)
):
    category = crud.create_category(db, body, principal.id)
    return {"success": True, "data": {"id": category.id}}


@router.patch("/admin/categories/{id}")
def update_category(
    id: str,
    body: RatingCategoryUpdate,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db)
):
    if not crud.update_category(db, id, body, principal.id):
        raise HTTPException(status_code=404, detail="Category not found")
    return {"success": True}


@router.delete("/admin/categories/{id}")
def delete_category(
    id: str,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db)
):
    if not crud.delete_category(db, id):
        raise HTTPException(status_code=404, detail="Category not found")
    return {"success": True}
