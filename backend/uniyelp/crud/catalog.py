"""
Catalog CRUD Operations
"""
from typing import List, Optional, Tuple

from sqlalchemy import desc
from sqlalchemy.orm import Session

from uniyelp.core.errors import Conflict
from uniyelp.models.base import slugify
from uniyelp.models.catalog import (
    AcademicCourse,
    AcademicProgram,
    College,
    CollegeDepartment,
    CollegeDepartmentProgram,
    CollegeDepartmentProgramCourse,
    Department,
    University,
)
from uniyelp.schemas.catalog import (
    CollegeCreate,
    CollegeUpdate,
    CourseCreate,
    DepartmentCreate,
    ProgramCreate,
    UniversityCreate,
)


def _fields(data, exclude_none: bool = True) -> dict:
    values = data.model_dump(exclude_unset=True)
    if exclude_none:
        values = {k: v for k, v in values.items() if v is not None}
    return values


def _ensure_free(db: Session, model, column: str, value: str) -> None:
    if db.query(model).filter(getattr(model, column) == value).first() is not None:
        raise Conflict(f"{model.__tablename__}.{column} '{value}' already exists")


def _save(db: Session, record):
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


# =============================================================================
# Entities
# =============================================================================

def create_university(db: Session, data: UniversityCreate, user_id: str) -> University:
    slug = slugify(data.name)
    _ensure_free(db, University, "slug", slug)
    return _save(db, University(slug=slug, created_by_id=user_id, updated_by_id=user_id, **_fields(data)))


def create_college(db: Session, data: CollegeCreate, user_id: str) -> College:
    slug = slugify(data.name)
    _ensure_free(db, College, "slug", slug)
    return _save(db, College(slug=slug, created_by_id=user_id, updated_by_id=user_id, **_fields(data)))


def get_college(db: Session, college_id: str) -> Optional[College]:
    return db.query(College).filter(College.id == college_id).first()


def get_colleges(
    db: Session,
    q: Optional[str] = None,
    university_id: Optional[str] = None,
    skip: int = 0,
    limit: int = 20
) -> Tuple[List[College], int]:
    """Active colleges, newest first; returns data and total count"""
    query = db.query(College).filter(College.is_active.is_(True))

    if q:
        query = query.filter(College.name.ilike(f"%{q}%"))
    if university_id:
        query = query.filter(College.university_id == university_id)

    total = query.count()
    colleges = query.order_by(desc(College.created_at), College.name).offset(skip).limit(limit).all()
    return colleges, total


def update_college(db: Session, college_id: str, data: CollegeUpdate, user_id: str) -> Optional[College]:
    college = get_college(db, college_id)
    if not college:
        return None

    for field, value in _fields(data).items():
        setattr(college, field, value)
    college.updated_by_id = user_id

    db.commit()
    db.refresh(college)
    return college


def create_department(db: Session, data: DepartmentCreate, user_id: str) -> Department:
    slug = slugify(data.name)
    _ensure_free(db, Department, "slug", slug)
    return _save(db, Department(slug=slug, created_by_id=user_id, updated_by_id=user_id, **_fields(data)))


def create_program(db: Session, data: ProgramCreate) -> AcademicProgram:
    _ensure_free(db, AcademicProgram, "code", data.code)
    return _save(db, AcademicProgram(**_fields(data)))


def create_course(db: Session, data: CourseCreate) -> AcademicCourse:
    _ensure_free(db, AcademicCourse, "code", data.code)
    return _save(db, AcademicCourse(**_fields(data)))


# =============================================================================
# Hierarchy links
# =============================================================================

def find_college_department(db: Session, college_id: str, department_id: str) -> Optional[CollegeDepartment]:
    """
    The college -> department link, preferring the active row.

    A soft-removed pair can have several rows; the active one (if any) wins,
    otherwise the first stored.
    """
    return db.query(CollegeDepartment).filter(
        CollegeDepartment.college_id == college_id,
        CollegeDepartment.department_id == department_id,
    ).order_by(desc(CollegeDepartment.is_active)).first()


def find_college_department_program(
    db: Session,
    college_id: str,
    department_id: str,
    program_id: str
) -> Optional[CollegeDepartmentProgram]:
    return db.query(CollegeDepartmentProgram).join(
        CollegeDepartment,
        CollegeDepartment.id == CollegeDepartmentProgram.college_department_id,
    ).filter(
        CollegeDepartment.college_id == college_id,
        CollegeDepartment.department_id == department_id,
        CollegeDepartmentProgram.program_id == program_id,
    ).order_by(
        desc(CollegeDepartment.is_active),
        desc(CollegeDepartmentProgram.is_active),
    ).first()


def find_college_department_program_course(
    db: Session,
    college_id: str,
    department_id: str,
    program_id: str,
    course_id: str
) -> Optional[CollegeDepartmentProgramCourse]:
    program_link = find_college_department_program(db, college_id, department_id, program_id)
    if program_link is None:
        return None
    return db.query(CollegeDepartmentProgramCourse).filter(
        CollegeDepartmentProgramCourse.college_department_program_id == program_link.id,
        CollegeDepartmentProgramCourse.course_id == course_id,
    ).order_by(desc(CollegeDepartmentProgramCourse.is_active)).first()


def get_college_departments(db: Session, college_id: str) -> List[Tuple[CollegeDepartment, Department]]:
    """Active department links of a college"""
    return db.query(CollegeDepartment, Department).join(
        Department, Department.id == CollegeDepartment.department_id
    ).filter(
        CollegeDepartment.college_id == college_id,
        CollegeDepartment.is_active.is_(True),
    ).order_by(Department.name).all()


def get_department_programs(
    db: Session,
    college_department_id: str
) -> List[Tuple[CollegeDepartmentProgram, AcademicProgram]]:
    return db.query(CollegeDepartmentProgram, AcademicProgram).join(
        AcademicProgram, AcademicProgram.id == CollegeDepartmentProgram.program_id
    ).filter(
        CollegeDepartmentProgram.college_department_id == college_department_id,
        CollegeDepartmentProgram.is_active.is_(True),
    ).order_by(AcademicProgram.name).all()


def get_program_courses(
    db: Session,
    college_department_program_id: str
) -> List[Tuple[CollegeDepartmentProgramCourse, AcademicCourse]]:
    return db.query(CollegeDepartmentProgramCourse, AcademicCourse).join(
        AcademicCourse, AcademicCourse.id == CollegeDepartmentProgramCourse.course_id
    ).filter(
        CollegeDepartmentProgramCourse.college_department_program_id == college_department_program_id,
        CollegeDepartmentProgramCourse.is_active.is_(True),
    ).order_by(AcademicCourse.code).all()


def update_link(db: Session, link, data):
    """Apply a partial update to a junction row"""
    for field, value in _fields(data).items():
        setattr(link, field, value)
    db.commit()
    db.refresh(link)
    return link


def delete_link(db: Session, link) -> None:
    """Hard delete of one junction row"""
    db.delete(link)
    db.commit()

