"""
Profile service: reads and partially updates a user's academic placement.

The placement is a chain (university -> department -> semester). Each link
must belong to the one above it. Moving a higher link without naming the
lower ones clears them, so a saved profile never points across universities.
"""

from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from api.models.models import Department, Semester, University, User as DbUser, UserProfile
from api.schemas.profile_schemas import ProfileResponse, ProfileUpdateRequest
from api.utils.common import iso_format
from api.utils.logger import configure_logging

logger = configure_logging()

_CHAIN = ("university_id", "department_id", "semester_id")
_DETAILS = ("phone_number", "bio", "location", "profile_image")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def profile_response(user: DbUser, profile: Optional[UserProfile]) -> ProfileResponse:
    if profile is None:
        return ProfileResponse(email=user.email, display_name=user.display_name)
    return ProfileResponse(
        email=user.email,
        display_name=user.display_name,
        university_id=profile.university_id,
        university_name=profile.university.name if profile.university else None,
        department_id=profile.department_id,
        department_name=profile.department.name if profile.department else None,
        semester_id=profile.semester_id,
        semester_number=profile.semester.number if profile.semester else None,
        profile_completed=profile.profile_completed,
        phone_number=profile.phone_number,
        bio=profile.bio,
        location=profile.location,
        profile_image=profile.profile_image,
        updated_at=iso_format(profile.updated_at),
    )


def get_profile(user: DbUser, db: Session) -> ProfileResponse:
    profile = db.query(UserProfile).filter(UserProfile.user_id == user.id).first()
    return profile_response(user, profile)


def _resolve_chain(profile: UserProfile, changes: dict) -> dict:
    """Merge requested placement changes over the stored one."""
    chain = {key: getattr(profile, key) for key in _CHAIN}
    for i, key in enumerate(_CHAIN):
        if key not in changes:
            continue
        new_value = _clean(changes[key])
        if new_value != chain[key]:
            for lower in _CHAIN[i + 1:]:
                if lower not in changes:
                    chain[lower] = None
        chain[key] = new_value
    return chain


def _validate_chain(chain: dict, db: Session) -> None:
    university_id, department_id, semester_id = (chain[k] for k in _CHAIN)
    if university_id is not None:
        if db.query(University).filter(University.id == university_id).first() is None:
            raise HTTPException(status_code=404, detail="University not found")
    if department_id is not None:
        department = db.query(Department).filter(Department.id == department_id).first()
        if department is None:
            raise HTTPException(status_code=404, detail="Department not found")
        if department.university_id != university_id:
            raise HTTPException(status_code=400, detail="Department does not belong to the selected university")
    if semester_id is not None:
        semester = db.query(Semester).filter(Semester.id == semester_id).first()
        if semester is None:
            raise HTTPException(status_code=404, detail="Semester not found")
        if semester.department_id != department_id:
            raise HTTPException(status_code=400, detail="Semester does not belong to the selected department")


def update_profile(user: DbUser, req: ProfileUpdateRequest, db: Session) -> ProfileResponse:
    changes = req.model_dump(exclude_unset=True)
    profile = db.query(UserProfile).filter(UserProfile.user_id == user.id).first()
    created = profile is None
    if created:
        profile = UserProfile(user_id=user.id, profile_completed=False)

    chain = _resolve_chain(profile, changes)
    _validate_chain(chain, db)

    if "display_name" in changes:
        user.display_name = _clean(changes["display_name"])
    for key, value in chain.items():
        setattr(profile, key, value)
    for key in _DETAILS:
        if key in changes:
            setattr(profile, key, _clean(changes[key]))
    profile.profile_completed = all(chain[k] is not None for k in _CHAIN)
    profile.updated_at = datetime.utcnow()

    if created:
        db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info(
        "profile saved user=%s created=%s completed=%s fields=%s",
        user.id, created, profile.profile_completed, sorted(changes),
    )
    return profile_response(user, profile)
