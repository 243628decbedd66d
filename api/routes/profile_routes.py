"""
Profile endpoints: the signed-in user's academic placement.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.config import get_db
from api.models.models import Subject, User as DbUser, UserProfile
from api.schemas.catalog_schemas import SubjectListResponse, SubjectResponse
from api.schemas.profile_schemas import ProfileResponse, ProfileUpdateRequest
from api.schemas.user_schemas import User
from api.services import profile_service
from api.utils.auth import get_current_user

profile_routes = APIRouter()


def _db_user(user: User, db: Session) -> DbUser:
    row = db.query(DbUser).filter(DbUser.email == user.email).first()
    if row is None:
        raise HTTPException(status_code=401, detail="User not found")
    return row


@profile_routes.get("/profile", response_model=ProfileResponse)
async def get_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProfileResponse:
    """Stored profile, or an empty incomplete one if the user never saved it."""
    return profile_service.get_profile(_db_user(current_user, db), db)


@profile_routes.put("/profile", response_model=ProfileResponse)
async def update_profile(
    request: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProfileResponse:
    return profile_service.update_profile(_db_user(current_user, db), request, db)


@profile_routes.get("/profile/subjects", response_model=SubjectListResponse)
async def list_profile_subjects(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SubjectListResponse:
    """Subjects of the user's semester; empty until the profile is complete."""
    user = _db_user(current_user, db)
    profile = db.query(UserProfile).filter(UserProfile.user_id == user.id).first()
    if profile is None or not profile.profile_completed:
        return SubjectListResponse(subjects=[])
    rows = db.query(Subject).filter(Subject.semester_id == profile.semester_id).order_by(Subject.name.asc()).all()
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
