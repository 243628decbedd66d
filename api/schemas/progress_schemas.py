"""
Progress, leaderboard and achievement schemas.
"""

from pydantic import BaseModel, Field
from typing import Literal, Optional


EventKindLiteral = Literal[
    "open_materials",
    "answer_quiz_batch",
    "view_syllabus_section",
    "explicit_progress",
]


class ProgressEventRequest(BaseModel):
    """One learning action. Only the fields relevant to `kind` are read."""
    kind: EventKindLiteral
    first_open: bool = False  # open_materials: first open in this UI session
    correct_count: Optional[int] = None  # answer_quiz_batch
    total_count: Optional[int] = None  # answer_quiz_batch
    percentage: Optional[int] = None  # view_syllabus_section / explicit_progress
    confirm_completion: bool = False  # explicit_progress


class QuizSubmissionRequest(BaseModel):
    """Answer index per question, in question order; null means unanswered."""
    answers: list[Optional[int]] = Field(default_factory=list)


class ProgressRecordResponse(BaseModel):
    subject_id: str
    status: str
    completion_percentage: int
    xp_points: int
    study_streak: int
    gate_questions_completed: bool
    completion_state: str
    last_activity: Optional[str] = None


class ProgressListResponse(BaseModel):
    total_xp: int
    records: list[ProgressRecordResponse]


class AchievementResponse(BaseModel):
    achievement_type: str
    title: str
    description: Optional[str] = None
    xp_reward: int
    earned_at: Optional[str] = None


class AchievementListResponse(BaseModel):
    achievements: list[AchievementResponse]


class EventOutcomeResponse(BaseModel):
    record: ProgressRecordResponse
    xp_gained: int
    prompt_confirmation: bool
    unlocked: list[AchievementResponse] = []


class LeaderboardEntryResponse(BaseModel):
    rank: int
    name: str
    avatar: Optional[str] = None
    total_xp: int
    current_streak: int
    is_synthetic: bool
    is_current_user: bool


class LeaderboardResponse(BaseModel):
    entries: list[LeaderboardEntryResponse]
    user_rank: int


class TotalXPResponse(BaseModel):
    total_xp: int
