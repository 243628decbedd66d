"""
Catalog schemas: universities, departments, semesters, subjects.
"""

from pydantic import BaseModel
from typing import Optional


class UniversityResponse(BaseModel):
    id: str
    name: str
    short_name: Optional[str] = None
    location: Optional[str] = None


class DepartmentResponse(BaseModel):
    id: str
    university_id: str
    name: str
    code: str


class SemesterResponse(BaseModel):
    id: str
    department_id: str
    number: int


class SubjectResponse(BaseModel):
    id: str
    semester_id: str
    name: str
    code: str
    credits: Optional[int] = None
    has_materials: bool = False


class UniversityListResponse(BaseModel):
    universities: list[UniversityResponse]


class DepartmentListResponse(BaseModel):
    departments: list[DepartmentResponse]


class SemesterListResponse(BaseModel):
    semesters: list[SemesterResponse]


class SubjectListResponse(BaseModel):
    subjects: list[SubjectResponse]
