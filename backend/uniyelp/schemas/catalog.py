"""
Catalog Schemas - Pydantic models
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class UniversityCreate(BaseModel):
    name: str
    description: Optional[str] = None
    website_url: Optional[str] = Field(None, alias="websiteUrl")
    location: Optional[str] = None
    country: Optional[str] = None
    is_active: Optional[bool] = Field(None, alias="isActive")

    class Config:
        populate_by_name = True


class CollegeCreate(BaseModel):
    university_id: str = Field(..., alias="universityId")
    name: str
    type: Optional[str] = None
    description: Optional[str] = None
    website_url: Optional[str] = Field(None, alias="websiteUrl")
    location: Optional[str] = None
    is_active: Optional[bool] = Field(None, alias="isActive")

    class Config:
        populate_by_name = True


class CollegeUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    website_url: Optional[str] = Field(None, alias="websiteUrl")
    location: Optional[str] = None
    is_active: Optional[bool] = Field(None, alias="isActive")

    class Config:
        populate_by_name = True


class DepartmentCreate(BaseModel):
    name: str
    description: Optional[str] = None
    website_url: Optional[str] = Field(None, alias="websiteUrl")
    is_active: Optional[bool] = Field(None, alias="isActive")

    class Config:
        populate_by_name = True


class ProgramCreate(BaseModel):
    name: str
    code: str
    description: Optional[str] = None
    credits: Optional[str] = None
    degree_level: Optional[str] = Field(None, alias="degreeLevel")
    is_active: Optional[bool] = Field(None, alias="isActive")

    class Config:
        populate_by_name = True


class CourseCreate(BaseModel):
    name: str
    code: str
    description: Optional[str] = None
    credits: Optional[str] = None
    is_active: Optional[bool] = Field(None, alias="isActive")

    class Config:
        populate_by_name = True


class CollegeResponse(BaseModel):
    id: str
    university_id: str
    name: str
    slug: str
    type: Optional[str] = None
    description: Optional[str] = None
    website_url: Optional[str] = None
    location: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Hierarchy sync bodies

class DepartmentSyncRequest(BaseModel):
    department_ids: List[str] = Field(..., alias="departmentIds")

    class Config:
        populate_by_name = True


class ProgramSyncRequest(BaseModel):
    program_ids: List[str] = Field(..., alias="programIds")

    class Config:
        populate_by_name = True


class CourseSyncRequest(BaseModel):
    course_ids: List[str] = Field(..., alias="courseIds")

    class Config:
        populate_by_name = True


# Single link updates

class CollegeDepartmentUpdate(BaseModel):
    description: Optional[str] = None
    website_url: Optional[str] = Field(None, alias="websiteUrl")
    is_active: Optional[bool] = Field(None, alias="isActive")

    class Config:
        populate_by_name = True


class ProgramLinkUpdate(BaseModel):
    code: Optional[str] = None
    description: Optional[str] = None
    credits: Optional[str] = None
    is_active: Optional[bool] = Field(None, alias="isActive")

    class Config:
        populate_by_name = True
