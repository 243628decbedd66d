"""
Catalog and subject content endpoints (read-only).
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.config import get_db
from api.models.models import Department, Semester, Subject, SubjectMaterial, University
from api.schemas.catalog_schemas import (
    DepartmentListResponse,
    DepartmentResponse,
    SemesterListResponse,
    SemesterResponse,
    SubjectListResponse,
    SubjectResponse,
    UniversityListResponse,
    UniversityResponse,
)
from api.schemas.material_schemas import QuizQuestionPublic, QuizResponse, SubjectMaterialsResponse
from api.schemas.user_schemas import User
from api.utils.auth import get_current_user
from api.utils.common import get_subject_or_404, iso_format
from infra.store.sql_store import parse_gate_questions

catalog_routes = APIRouter()


@catalog_routes.get("/catalog/universities", response_model=UniversityListResponse)
async def list_universities(db: Session = Depends(get_db)) -> UniversityListResponse:
    rows = db.query(University).order_by(University.name.asc()).all()
    return UniversityListResponse(
        universities=[
            UniversityResponse(id=u.id, name=u.name, short_name=u.short_name, location=u.location)
            for u in rows
        ]
    )


@catalog_routes.get("/catalog/universities/{university_id}/departments", response_model=DepartmentListResponse)
async def list_departments(university_id: str, db: Session = Depends(get_db)) -> DepartmentListResponse:
    if db.query(University).filter(University.id == university_id).first() is None:
        raise HTTPException(status_code=404, detail="University not found")
    rows = (
        db.query(Department)
        .filter(Department.university_id == university_id)
        .order_by(Department.name.asc())
        .all()
    )
    return DepartmentListResponse(
        departments=[
            DepartmentResponse(id=d.id, university_id=d.university_id, name=d.name, code=d.code)
            for d in rows
        ]
    )


@catalog_routes.get("/catalog/departments/{department_id}/semesters", response_model=SemesterListResponse)
async def list_semesters(department_id: str, db: Session = Depends(get_db)) -> SemesterListResponse:
    if db.query(Department).filter(Department.id == department_id).first() is None:
        raise HTTPException(status_code=404, detail="Department not found")
    rows = (
        db.query(Semester)
        .filter(Semester.department_id == department_id)
        .order_by(Semester.number.asc())
        .all()
    )
    return SemesterListResponse(
        semesters=[SemesterResponse(id=s.id, department_id=s.department_id, number=s.number) for s in rows]
    )


@catalog_routes.get("/catalog/semesters/{semester_id}/subjects", response_model=SubjectListResponse)
async def list_subjects(semester_id: str, db: Session = Depends(get_db)) -> SubjectListResponse:
    if db.query(Semester).filter(Semester.id == semester_id).first() is None:
        raise HTTPException(status_code=404, detail="Semester not found")
    rows = db.query(Subject).filter(Subject.semester_id == semester_id).order_by(Subject.name.asc()).all()
    return SubjectListResponse(
        subjects=[
            SubjectResponse(
                id=s.id,
                semester_id=s.semester_id,
                name=s.name,
                code=s.code,
                credits=s.credits,
                has_materials=s.materials is not None,
            )
            for s in rows
        ]
    )


def _materials_or_404(subject_id: str, db: Session) -> SubjectMaterial:
    get_subject_or_404(subject_id, db)
    materials = db.query(SubjectMaterial).filter(SubjectMaterial.subject_id == subject_id).first()
    if materials is None:
        raise HTTPException(status_code=404, detail="No materials for this subject")
    return materials


@catalog_routes.get("/subjects/{subject_id}/materials", response_model=SubjectMaterialsResponse)
async def get_subject_materials(
    subject_id: str,
    _user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SubjectMaterialsResponse:
    """Study materials for a subject. Payloads are returned as stored."""
    m = _materials_or_404(subject_id, db)
    return SubjectMaterialsResponse(
        subject_id=subject_id,
        syllabus=m.syllabus,
        syllabus_json=m.syllabus_json,
        drive_link=m.drive_link,
        question_count=len(m.gate_questions or []),
        dpp_materials=m.dpp_materials or [],
        related_posts=m.related_posts or [],
        video_resources=m.video_resources or [],
        practice_tests=m.practice_tests or [],
        updated_at=iso_format(m.updated_at),
    )


@catalog_routes.get("/subjects/{subject_id}/quiz", response_model=QuizResponse)
async def get_subject_quiz(
    subject_id: str,
    _user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> QuizResponse:
    """GATE questions without answers; scoring happens server-side on submit."""
    m = _materials_or_404(subject_id, db)
    # Validates the stored shape before exposing anything.
    parse_gate_questions(subject_id, m.gate_questions)
    questions = [
        QuizQuestionPublic(
            index=idx,
            question=q.get("question"),
            options=list(q.get("options") or []),
            difficulty=q.get("difficulty"),
            year=q.get("year"),
        )
        for idx, q in enumerate(m.gate_questions or [])
    ]
    return QuizResponse(subject_id=subject_id, questions=questions)
