"""
Catalog Models - university / college / department / program / course

Colleges are linked to departments, departments (per college) to programs and
programs (per college department) to courses through junction tables. A pair
may own several junction rows over time; at most one of them is active.
"""
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.sql import func

from uniyelp.core.database import Base
from uniyelp.models.base import generate_id


class University(Base):
    """University table"""
    __tablename__ = "universities"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    website_url = Column(String(500), nullable=True)
    location = Column(String(255), nullable=True)
    country = Column(String(100), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_by_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<University({self.slug})>"


class College(Base):
    """College table"""
    __tablename__ = "colleges"

    id = Column(String(36), primary_key=True, default=generate_id)
    university_id = Column(String(36), ForeignKey("universities.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False, index=True)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    type = Column(String(50), nullable=True, comment="constituent / affiliated")
    description = Column(Text, nullable=True)
    website_url = Column(String(500), nullable=True)
    location = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_by_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<College({self.slug})>"


class Department(Base):
    """Department table"""
    __tablename__ = "departments"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    website_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_by_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Department({self.slug})>"


class AcademicProgram(Base):
    """Academic program table"""
    __tablename__ = "academic_programs"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    code = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    credits = Column(String(20), nullable=True)
    degree_level = Column(String(30), nullable=True, comment="undergraduate / postgraduate / ...")
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<AcademicProgram({self.code})>"


class AcademicCourse(Base):
    """Academic course table"""
    __tablename__ = "academic_courses"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    code = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    credits = Column(String(20), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<AcademicCourse({self.code})>"


class CollegeDepartment(Base):
    """College -> Department junction"""
    __tablename__ = "college_departments"

    id = Column(String(36), primary_key=True, default=generate_id)
    college_id = Column(String(36), ForeignKey("colleges.id", ondelete="CASCADE"), nullable=False)
    department_id = Column(String(36), ForeignKey("departments.id", ondelete="CASCADE"), nullable=False)
    description = Column(Text, nullable=True, comment="college specific description")
    website_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        Index("ix_college_department_pair", "college_id", "department_id"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "college_id": self.college_id,
            "department_id": self.department_id,
            "description": self.description,
            "website_url": self.website_url,
            "is_active": self.is_active,
        }


class CollegeDepartmentProgram(Base):
    """(College, Department) -> Program junction"""
    __tablename__ = "college_department_programs"

    id = Column(String(36), primary_key=True, default=generate_id)
    college_department_id = Column(String(36), ForeignKey("college_departments.id", ondelete="CASCADE"), nullable=False)
    program_id = Column(String(36), ForeignKey("academic_programs.id", ondelete="CASCADE"), nullable=False)
    code = Column(String(100), nullable=True, comment="program code inside this college department")
    description = Column(Text, nullable=True)
    credits = Column(String(20), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("ix_college_department_program_pair", "college_department_id", "program_id"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "college_department_id": self.college_department_id,
            "program_id": self.program_id,
            "code": self.code,
            "description": self.description,
            "credits": self.credits,
            "is_active": self.is_active,
        }


class CollegeDepartmentProgramCourse(Base):
    """(College, Department, Program) -> Course junction"""
    __tablename__ = "college_department_program_courses"

    id = Column(String(36), primary_key=True, default=generate_id)
    college_department_program_id = Column(
        String(36), ForeignKey("college_department_programs.id", ondelete="CASCADE"), nullable=False
    )
    course_id = Column(String(36), ForeignKey("academic_courses.id", ondelete="CASCADE"), nullable=False)
    code = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    credits = Column(String(20), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("ix_college_department_program_course_pair", "college_department_program_id", "course_id"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "college_department_program_id": self.college_department_program_id,
            "course_id": self.course_id,
            "code": self.code,
            "description": self.description,
            "credits": self.credits,
            "is_active": self.is_active,
        }
