"""
Common utility functions used across multiple routes.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session
from fastapi import HTTPException

from api.models.models import User as DbUser, Subject


def iso_format(dt: Optional[datetime]) -> Optional[str]:
    """Format datetime as ISO string with Z suffix (naive values are UTC)."""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.isoformat() + "Z"


def get_db_user_id(email: str, db: Session) -> str:
    """Get database user ID from email."""
    u = db.query(DbUser).filter(DbUser.email == email).first()
    if not u:
        raise HTTPException(status_code=401, detail="User not found")
    return str(u.id)


def get_subject_or_404(subject_id: str, db: Session) -> Subject:
    subject = db.query(Subject).filter(Subject.id == subject_id).first()
    if subject is None:
        raise HTTPException(status_code=404, detail="Subject not found")
    return subject
