"""
Profile schemas: the user's academic placement and contact details.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ProfileResponse(BaseModel):
    email: str
    display_name: Optional[str] = None
    university_id: Optional[str] = None
    university_name: Optional[str] = None
    department_id: Optional[str] = None
    department_name: Optional[str] = None
    semester_id: Optional[str] = None
    semester_number: Optional[int] = None
    profile_completed: bool = False
    phone_number: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    profile_image: Optional[str] = None
    updated_at: Optional[str] = None


class ProfileUpdateRequest(BaseModel):
    """Partial update: only fields present in the body are changed; null clears a field."""
    display_name: Optional[str] = Field(default=None, max_length=100)
    university_id: Optional[str] = None
    department_id: Optional[str] = None
    semester_id: Optional[str] = None
    phone_number: Optional[str] = Field(default=None, max_length=32)
    bio: Optional[str] = Field(default=None, max_length=1000)
    location: Optional[str] = Field(default=None, max_length=200)
    profile_image: Optional[str] = None
