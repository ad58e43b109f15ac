from uniyelp.models.user import User, UserSession, ApiKey
from uniyelp.models.catalog import (
    University,
    College,
    Department,
    AcademicProgram,
    AcademicCourse,
    CollegeDepartment,
    CollegeDepartmentProgram,
    CollegeDepartmentProgramCourse,
)
from uniyelp.models.rating import (
    RatingCategory,
    Rating,
    UniversityRating,
    CollegeRating,
    DepartmentRating,
    ProgramRating,
    CourseRating,
)

__all__ = [
    "User",
    "UserSession",
    "ApiKey",
    "University",
    "College",
    "Department",
    "AcademicProgram",
    "AcademicCourse",
    "CollegeDepartment",
    "CollegeDepartmentProgram",
    "CollegeDepartmentProgramCourse",
    "RatingCategory",
    "Rating",
    "UniversityRating",
    "CollegeRating",
    "DepartmentRating",
    "ProgramRating",
    "CourseRating",
]
