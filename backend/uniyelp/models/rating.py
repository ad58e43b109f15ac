"""
Rating Models

A ``Rating`` is attached to exactly one ratable entity through exactly one row
in one of the per-entity junction tables below.
"""
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func

from uniyelp.core.database import Base
from uniyelp.models.base import generate_id


class RatingCategory(Base):
    """Rating category table"""
    __tablename__ = "rating_categories"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(200), nullable=False)
    slug = Column(String(200), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    sort_order = Column(String(10), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_by_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "sort_order": self.sort_order,
            "is_active": self.is_active,
        }


class Rating(Base):
    """Rating table"""
    __tablename__ = "ratings"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    rating_category_id = Column(String(36), ForeignKey("rating_categories.id", ondelete="RESTRICT"), nullable=False, index=True)
    value = Column(String(20), nullable=False)
    review = Column(Text, nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Rating(id={self.id}, category={self.rating_category_id}, value={self.value})>"

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "rating_category_id": self.rating_category_id,
            "rating": self.value,
            "review": self.review,
            "is_verified": self.is_verified,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class UniversityRating(Base):
    __tablename__ = "university_ratings"

    university_id = Column(String(36), ForeignKey("universities.id", ondelete="CASCADE"), primary_key=True)
    rating_id = Column(String(36), ForeignKey("ratings.id", ondelete="CASCADE"), primary_key=True, index=True)


class CollegeRating(Base):
    __tablename__ = "college_ratings"

    college_id = Column(String(36), ForeignKey("colleges.id", ondelete="CASCADE"), primary_key=True)
    rating_id = Column(String(36), ForeignKey("ratings.id", ondelete="CASCADE"), primary_key=True, index=True)


class DepartmentRating(Base):
    __tablename__ = "department_ratings"

    department_id = Column(String(36), ForeignKey("departments.id", ondelete="CASCADE"), primary_key=True)
    rating_id = Column(String(36), ForeignKey("ratings.id", ondelete="CASCADE"), primary_key=True, index=True)


class ProgramRating(Base):
    __tablename__ = "program_ratings"

    program_id = Column(String(36), ForeignKey("academic_programs.id", ondelete="CASCADE"), primary_key=True)
    rating_id = Column(String(36), ForeignKey("ratings.id", ondelete="CASCADE"), primary_key=True, index=True)


class CourseRating(Base):
    __tablename__ = "course_ratings"

    course_id = Column(String(36), ForeignKey("academic_courses.id", ondelete="CASCADE"), primary_key=True)
    rating_id = Column(String(36), ForeignKey("ratings.id", ondelete="CASCADE"), primary_key=True, index=True)
