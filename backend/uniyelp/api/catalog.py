"""
Catalog API - colleges, departments, programs, courses and their links
"""
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from uniyelp.api.deps import authorize, get_reconcilers
from uniyelp.auth.policies import require_role
from uniyelp.core.database import get_db, transaction
from uniyelp.crud import catalog as crud
from uniyelp.schemas.auth import Principal, Role
from uniyelp.schemas.catalog import (
    CollegeCreate,
    CollegeDepartmentUpdate,
    CollegeResponse,
    CollegeUpdate,
    CourseCreate,
    CourseSyncRequest,
    DepartmentCreate,
    DepartmentSyncRequest,
    ProgramCreate,
    ProgramLinkUpdate,
    ProgramSyncRequest,
    UniversityCreate,
)
from uniyelp.services.reconciler import (
    COLLEGE_DEPARTMENT_PROGRAM_COURSES,
    COLLEGE_DEPARTMENT_PROGRAMS,
    COLLEGE_DEPARTMENTS,
    HierarchyReconciler,
)

router = APIRouter(tags=["catalog"])

require_admin = authorize(require_role(Role.ADMIN))


def _college_or_404(db: Session, college_id: str):
    college = crud.get_college(db, college_id)
    if not college:
        raise HTTPException(status_code=404, detail="College not found")
    return college


def _college_department_or_404(db: Session, college_id: str, department_id: str):
    link = crud.find_college_department(db, college_id, department_id)
    if not link:
        raise HTTPException(status_code=404, detail="College department not found")
    return link


def _program_link_or_404(db: Session, college_id: str, department_id: str, program_id: str):
    link = crud.find_college_department_program(db, college_id, department_id, program_id)
    if not link:
        raise HTTPException(status_code=404, detail="College department program not found")
    return link


# =============================================================================
# Public reads
# =============================================================================

@router.get("/colleges")
def list_colleges(
    q: Optional[str] = Query(None, description="Filter by name"),
    university_id: Optional[str] = Query(None, alias="universityId"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize"),
    db: Session = Depends(get_db)
):
    """Paginated list of active colleges"""
    skip = (page - 1) * page_size
    colleges, total = crud.get_colleges(db, q=q, university_id=university_id, skip=skip, limit=page_size)
    return {
        "success": True,
        "data": {
            "total": total,
            "page": page,
            "page_size": page_size,
            "items": [CollegeResponse.model_validate(c).model_dump() for c in colleges],
        },
    }


@router.get("/colleges/{id}")
def get_college(id: str, db: Session = Depends(get_db)):
    college = _college_or_404(db, id)
    return {"success": True, "data": CollegeResponse.model_validate(college).model_dump()}


@router.get("/colleges/{id}/departments")
def list_college_departments(id: str, db: Session = Depends(get_db)):
    _college_or_404(db, id)
    rows = crud.get_college_departments(db, id)
    return {
        "success": True,
        "data": [
            {**link.to_dict(), "name": department.name, "slug": department.slug}
            for link, department in rows
        ],
    }


@router.get("/colleges/{id}/departments/{department_id}/programs")
def list_department_programs(id: str, department_id: str, db: Session = Depends(get_db)):
    link = _college_department_or_404(db, id, department_id)
    rows = crud.get_department_programs(db, link.id)
    return {
        "success": True,
        "data": [
            {**program_link.to_dict(), "name": program.name, "program_code": program.code}
            for program_link, program in rows
        ],
    }


@router.get("/colleges/{id}/departments/{department_id}/programs/{program_id}/courses")
def list_program_courses(id: str, department_id: str, program_id: str, db: Session = Depends(get_db)):
    link = _program_link_or_404(db, id, department_id, program_id)
    rows = crud.get_program_courses(db, link.id)
    return {
        "success": True,
        "data": [
            {**course_link.to_dict(), "name": course.name, "course_code": course.code}
            for course_link, course in rows
        ],
    }


# =============================================================================
# Admin: entities
# =============================================================================

@router.post("/universities/admin")
def create_university(
    body: UniversityCreate,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db)
):
    university = crud.create_university(db, body, principal.id)
    return {"success": True, "data": {"id": university.id, "slug": university.slug}}


@router.post("/colleges/admin")
def create_college(
    body: CollegeCreate,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db)
):
    college = crud.create_college(db, body, principal.id)
    return {"success": True, "data": {"id": college.id, "slug": college.slug}}


@router.patch("/colleges/admin/{id}")
def update_college(
    id: str,
    body: CollegeUpdate,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db)
):
    if not crud.update_college(db, id, body, principal.id):
        raise HTTPException(status_code=404, detail="College not found")
    return {"success": True}


@router.post("/departments/admin")
def create_department(
    body: DepartmentCreate,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db)
):
    department = crud.create_department(db, body, principal.id)
    return {"success": True, "data": {"id": department.id, "slug": department.slug}}


@router.post("/programs/admin")
def create_program(
    body: ProgramCreate,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db)
):
    program = crud.create_program(db, body)
    return {"success": True, "data": {"id": program.id, "code": program.code}}


@router.post("/courses/admin")
def create_course(
    body: CourseCreate,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db)
):
    course = crud.create_course(db, body)
    return {"success": True, "data": {"id": course.id, "code": course.code}}


# =============================================================================
# Admin: hierarchy sync
# =============================================================================

@router.post("/colleges/admin/{id}/departments")
def sync_college_departments(
    id: str,
    body: DepartmentSyncRequest,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
    reconcilers: Dict[str, HierarchyReconciler] = Depends(get_reconcilers)
):
    """Make ``departmentIds`` the exact set of departments linked to the college"""
    _college_or_404(db, id)
    with transaction(db) as tx:
        result = reconcilers[COLLEGE_DEPARTMENTS].reconcile(tx, id, body.department_ids)
    return {"success": True, "data": result.to_dict()}


@router.post("/colleges/admin/{id}/departments/{department_id}/programs")
def sync_department_programs(
    id: str,
    department_id: str,
    body: ProgramSyncRequest,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
    reconcilers: Dict[str, HierarchyReconciler] = Depends(get_reconcilers)
):
    link = _college_department_or_404(db, id, department_id)
    with transaction(db) as tx:
        result = reconcilers[COLLEGE_DEPARTMENT_PROGRAMS].reconcile(tx, link.id, body.program_ids)
    return {"success": True, "data": result.to_dict()}


@router.post("/colleges/admin/{id}/departments/{department_id}/programs/{program_id}/courses")
def sync_program_courses(
    id: str,
    department_id: str,
    program_id: str,
    body: CourseSyncRequest,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
    reconcilers: Dict[str, HierarchyReconciler] = Depends(get_reconcilers)
):
    link = _program_link_or_404(db, id, department_id, program_id)
    with transaction(db) as tx:
        result = reconcilers[COLLEGE_DEPARTMENT_PROGRAM_COURSES].reconcile(tx, link.id, body.course_ids)
    return {"success": True, "data": result.to_dict()}


# =============================================================================
# Admin: single links
# =============================================================================

@router.patch("/colleges/admin/{id}/departments/{department_id}")
def update_college_department(
    id: str,
    department_id: str,
    body: CollegeDepartmentUpdate,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db)
):
    link = _college_department_or_404(db, id, department_id)
    crud.update_link(db, link, body)
    return {"success": True, "data": {"id": id, "department_id": department_id}}


@router.delete("/colleges/admin/{id}/departments/{department_id}")
def delete_college_department(
    id: str,
    department_id: str,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db)
):
    link = _college_department_or_404(db, id, department_id)
    crud.delete_link(db, link)
    return {"success": True, "data": {"id": id, "department_id": department_id}}


@router.patch("/colleges/admin/{id}/departments/{department_id}/programs/{program_id}")
def update_department_program(
    id: str,
    department_id: str,
    program_id: str,
    body: ProgramLinkUpdate,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db)
):
    link = _program_link_or_404(db, id, department_id, program_id)
    crud.update_link(db, link, body)
    return {"success": True}


@router.delete("/colleges/admin/{id}/departments/{department_id}/programs/{program_id}")
def delete_department_program(
    id: str,
    department_id: str,
    program_id: str,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db)
):
    link = _program_link_or_404(db, id, department_id, program_id)
    crud.delete_link(db, link)
    return {"success": True}


@router.patch("/colleges/admin/{id}/departments/{department_id}/programs/{program_id}/courses/{course_id}")
def update_program_course(
    id: str,
    department_id: str,
    program_id: str,
    course_id: str,
    body: ProgramLinkUpdate,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db)
):
    link = crud.find_college_department_program_course(db, id, department_id, program_id, course_id)
    if not link:
        raise HTTPException(status_code=404, detail="College department program course not found")
    crud.update_link(db, link, body)
    return {"success": True}


@router.delete("/colleges/admin/{id}/departments/{department_id}/programs/{program_id}/courses/{course_id}")
def delete_program_course(
    id: str,
    department_id: str,
    program_id: str,
    course_id: str,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db)
):
    link = crud.find_college_department_program_course(db, id, department_id, program_id, course_id)
    if not link:
        raise HTTPException(status_code=404, detail="College department program course not found")
    crud.delete_link(db, link)
    return {"success": True}
