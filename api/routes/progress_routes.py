"""
Progress, completion, leaderboard and achievement endpoints.

Every response carries the record as stored; clients treat it as the source
of truth and keep no local prediction.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.config import get_db
from api.schemas.progress_schemas import (
    AchievementListResponse,
    EventOutcomeResponse,
    LeaderboardResponse,
    ProgressEventRequest,
    ProgressListResponse,
    ProgressRecordResponse,
    QuizSubmissionRequest,
    TotalXPResponse,
)
from api.schemas.user_schemas import User
from api.services.progress_service import ProgressService
from api.utils.auth import get_current_user
from api.utils.common import get_db_user_id, get_subject_or_404

progress_routes = APIRouter()


@progress_routes.get("/progress", response_model=ProgressListResponse)
async def list_progress(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProgressListResponse:
    """All of the user's subject records and their XP total."""
    user_id = get_db_user_id(current_user.email, db)
    return ProgressService(db).list_progress(user_id)


@progress_routes.get("/progress/{subject_id}", response_model=ProgressRecordResponse)
async def get_progress(
    subject_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProgressRecordResponse:
    """Record for one subject; zero-state when the user has not started it."""
    user_id = get_db_user_id(current_user.email, db)
    get_subject_or_404(subject_id, db)
    return ProgressService(db).get_progress(user_id, subject_id)


@progress_routes.post("/progress/{subject_id}/events", response_model=EventOutcomeResponse)
async def record_progress_event(
    subject_id: str,
    req: ProgressEventRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> EventOutcomeResponse:
    user_id = get_db_user_id(current_user.email, db)
    get_subject_or_404(subject_id, db)
    return ProgressService(db).record_event(user_id, subject_id, req)


@progress_routes.post("/progress/{subject_id}/quiz", response_model=EventOutcomeResponse)
async def submit_quiz(
    subject_id: str,
    req: QuizSubmissionRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> EventOutcomeResponse:
    """Score a GATE quiz attempt and record it as one batch."""
    user_id = get_db_user_id(current_user.email, db)
    get_subject_or_404(subject_id, db)
    return ProgressService(db).submit_quiz(user_id, subject_id, req.answers)


@progress_routes.post("/progress/{subject_id}/completion/confirm", response_model=EventOutcomeResponse)
async def confirm_completion(
    subject_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> EventOutcomeResponse:
    user_id = get_db_user_id(current_user.email, db)
    get_subject_or_404(subject_id, db)
    return ProgressService(db).confirm_completion(user_id, subject_id)


@progress_routes.post("/progress/{subject_id}/completion/decline", response_model=EventOutcomeResponse)
async def decline_completion(
    subject_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> EventOutcomeResponse:
    user_id = get_db_user_id(current_user.email, db)
    get_subject_or_404(subject_id, db)
    return ProgressService(db).decline_completion(user_id, subject_id)


@progress_routes.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    limit: Optional[int] = Query(None, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> LeaderboardResponse:
    user_id = get_db_user_id(current_user.email, db)
    return ProgressService(db).leaderboard(user_id, limit=limit)


@progress_routes.get("/xp", response_model=TotalXPResponse)
async def get_total_xp(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TotalXPResponse:
    user_id = get_db_user_id(current_user.email, db)
    return TotalXPResponse(total_xp=ProgressService(db).total_xp(user_id))


@progress_routes.get("/achievements", response_model=AchievementListResponse)
async def list_achievements(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> AchievementListResponse:
    user_id = get_db_user_id(current_user.email, db)
    return AchievementListResponse(achievements=ProgressService(db).achievements(user_id))
