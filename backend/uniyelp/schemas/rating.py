"""
Rating Schemas - Pydantic models
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class RatingCreate(BaseModel):
    """``entity_type`` stays a plain string here; it is parsed by the attacher"""
    entity_type: str = Field(..., alias="entityType")
    entity_id: str = Field(..., alias="entityId")
    category_id: str = Field(..., alias="categoryId")
    rating: str
    review: Optional[str] = None

    class Config:
        populate_by_name = True


class RatingResponse(BaseModel):
    id: str
    user_id: str
    rating_category_id: str
    rating: str = Field(..., validation_alias="value")
    review: Optional[str] = None
    is_verified: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RatingCategoryCreate(BaseModel):
    name: str
    description: Optional[str] = None
    sort_order: Optional[str] = Field(None, alias="sortOrder")
    is_active: Optional[bool] = Field(None, alias="isActive")

    class Config:
        populate_by_name = True


class RatingCategoryUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    sort_order: Optional[str] = Field(None, alias="sortOrder")
    is_active: Optional[bool] = Field(None, alias="isActive")

    class Config:
        populate_by_name = True


class RatingCategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    sort_order: Optional[str] = None
    is_active: bool

    class Config:
        from_attributes = True
