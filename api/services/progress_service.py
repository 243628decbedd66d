"""
Progress service: adapts ProgressEngine results to API schemas.
"""

from typing import List, Optional, Sequence

from sqlalchemy.orm import Session as DBSession

from api.bootstrap import build_engine
from api.schemas.progress_schemas import (
    AchievementResponse,
    EventOutcomeResponse,
    LeaderboardEntryResponse,
    LeaderboardResponse,
    ProgressEventRequest,
    ProgressListResponse,
    ProgressRecordResponse,
)
from api.utils.common import iso_format
from api.utils.logger import configure_logging, log_request
from progress_engine.completion import completion_state
from progress_engine.errors import ValidationError
from progress_engine.types import (
    Achievement,
    EventKind,
    EventOutcome,
    LearningEvent,
    ProgressRecord,
)

logger = configure_logging()


def record_response(record: ProgressRecord) -> ProgressRecordResponse:
    return ProgressRecordResponse(
        subject_id=record.subject_id,
        status=record.status.value,
        completion_percentage=record.completion_percentage,
        xp_points=record.xp_points,
        study_streak=record.study_streak,
        gate_questions_completed=record.gate_questions_completed,
        completion_state=completion_state(record).value,
        last_activity=iso_format(record.last_activity),
    )


def achievement_response(a: Achievement) -> AchievementResponse:
    return AchievementResponse(
        achievement_type=a.achievement_type,
        title=a.title,
        description=a.description,
        xp_reward=a.xp_reward,
        earned_at=iso_format(a.earned_at),
    )


def outcome_response(outcome: EventOutcome) -> EventOutcomeResponse:
    return EventOutcomeResponse(
        record=record_response(outcome.record),
        xp_gained=outcome.xp_gained,
        prompt_confirmation=outcome.prompt_confirmation,
        unlocked=[achievement_response(a) for a in outcome.unlocked],
    )


def event_from_request(req: ProgressEventRequest) -> LearningEvent:
    """Translate the wire event; shape problems surface as engine ValidationErrors."""
    kind = EventKind(req.kind)
    if kind is EventKind.OPEN_MATERIALS:
        return LearningEvent.open_materials(first_open=req.first_open)
    if kind is EventKind.ANSWER_QUIZ_BATCH:
        if req.correct_count is None or req.total_count is None:
            raise ValidationError("answer_quiz_batch needs correct_count and total_count", event_kind=kind.value)
        return LearningEvent.answer_quiz_batch(req.correct_count, req.total_count)
    if req.percentage is None:
        raise ValidationError(f"{kind.value} needs a percentage", event_kind=kind.value)
    if kind is EventKind.VIEW_SYLLABUS_SECTION:
        return LearningEvent.view_syllabus_section(req.percentage)
    return LearningEvent.explicit_progress(req.percentage, confirm_completion=req.confirm_completion)


class ProgressService:
    """Per-request facade over the progress engine."""

    def __init__(self, db: DBSession):
        self.db = db
        self.engine = build_engine(db)

    def list_progress(self, user_id: str) -> ProgressListResponse:
        records = sorted(self.engine.fetch_progress(user_id), key=lambda r: r.subject_id)
        return ProgressListResponse(
            total_xp=sum(r.xp_points for r in records),
            records=[record_response(r) for r in records],
        )

    def get_progress(self, user_id: str, subject_id: str) -> ProgressRecordResponse:
        return record_response(self.engine.get_progress(user_id, subject_id))

    def record_event(self, user_id: str, subject_id: str, req: ProgressEventRequest) -> EventOutcomeResponse:
        try:
            event = event_from_request(req)
        except ValidationError as e:
            e.with_context(user_id=user_id, subject_id=subject_id)
            logger.warning("event rejected user=%s subject=%s kind=%s reason=%s", user_id, subject_id, req.kind, e.message)
            raise
        return outcome_response(self.engine.apply_event(user_id, subject_id, event))

    def submit_quiz(self, user_id: str, subject_id: str, answers: Sequence[Optional[int]]) -> EventOutcomeResponse:
        with log_request(logger, f"quiz submit user={user_id} subject={subject_id}"):
            outcome = self.engine.submit_quiz(user_id, subject_id, answers)
        return outcome_response(outcome)

    def confirm_completion(self, user_id: str, subject_id: str) -> EventOutcomeResponse:
        return outcome_response(self.engine.confirm_completion(user_id, subject_id))

    def decline_completion(self, user_id: str, subject_id: str) -> EventOutcomeResponse:
        return outcome_response(self.engine.decline_completion(user_id, subject_id))

    def total_xp(self, user_id: str) -> int:
        return self.engine.get_total_xp(user_id)

    def leaderboard(self, user_id: str, *, name: str = "You", limit: Optional[int] = None) -> LeaderboardResponse:
        with log_request(logger, f"leaderboard user={user_id}"):
            view = self.engine.get_leaderboard(user_id, name=name, limit=limit)
        entries: List[LeaderboardEntryResponse] = [
            LeaderboardEntryResponse(
                rank=idx,
                name=e.name,
                avatar=e.avatar,
                total_xp=e.total_xp,
                current_streak=e.current_streak,
                is_synthetic=e.is_synthetic,
                is_current_user=not e.is_synthetic and e.id == user_id,
            )
            for idx, e in enumerate(view.entries, start=1)
        ]
        return LeaderboardResponse(entries=entries, user_rank=view.user_rank)

    def achievements(self, user_id: str) -> List[AchievementResponse]:
        return [achievement_response(a) for a in self.engine.get_achievements(user_id)]
