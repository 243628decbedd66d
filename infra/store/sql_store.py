"""
SQLAlchemy-backed implementations of the progress engine store contracts.

Each store wraps one request-scoped Session. Driver errors are translated into
the engine's taxonomy after rolling the session back:
IntegrityError -> WriteConflict, OperationalError -> UpstreamUnavailable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from api.models.models import LeaderboardCompetitor, SubjectMaterial, UserAchievement, UserProgress
from api.schemas.material_schemas import GateQuestionPayload
from progress_engine.errors import NotFound, UpstreamUnavailable, ValidationError, WriteConflict
from progress_engine.store import AchievementStore, ContentStore, LeaderboardStore, ProgressStore
from progress_engine.types import (
    Achievement,
    LeaderboardEntry,
    ProgressRecord,
    ProgressStatus,
    QuizQuestion,
)

logger = logging.getLogger(__name__)


def to_db_time(dt: Optional[datetime]) -> Optional[datetime]:
    """Columns hold naive UTC."""
    if dt is None or dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def from_db_time(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None or dt.tzinfo is not None:
        return dt
    return dt.replace(tzinfo=timezone.utc)


def row_to_record(row: UserProgress) -> ProgressRecord:
    return ProgressRecord(
        user_id=row.user_id,
        subject_id=row.subject_id,
        status=ProgressStatus(row.status),
        completion_percentage=int(row.completion_percentage),
        xp_points=int(row.xp_points),
        study_streak=int(row.study_streak),
        gate_questions_completed=bool(row.gate_questions_completed),
        completion_deferred=bool(row.completion_deferred),
        last_activity=from_db_time(row.last_activity),
    )


@dataclass
class SqlProgressStore(ProgressStore):
    db: Session

    def fetch_progress(self, user_id: str) -> List[ProgressRecord]:
        try:
            rows = self.db.query(UserProgress).filter(UserProgress.user_id == user_id).all()
        except OperationalError as e:
            self.db.rollback()
            raise UpstreamUnavailable("Progress store unreachable", user_id=user_id) from e
        return [row_to_record(r) for r in rows]

    def upsert_progress(self, record: ProgressRecord) -> ProgressRecord:
        try:
            row = (
                self.db.query(UserProgress)
                .filter(
                    UserProgress.user_id == record.user_id,
                    UserProgress.subject_id == record.subject_id,
                )
                .first()
            )
            if row is None:
                row = UserProgress(
                    id=str(uuid4()),
                    user_id=record.user_id,
                    subject_id=record.subject_id,
                    created_at=datetime.utcnow(),
                )
                self.db.add(row)
            row.status = record.status.value
            row.completion_percentage = record.completion_percentage
            row.xp_points = record.xp_points
            row.study_streak = record.study_streak
            row.gate_questions_completed = record.gate_questions_completed
            row.completion_deferred = record.completion_deferred
            row.last_activity = to_db_time(record.last_activity)
            row.updated_at = datetime.utcnow()
            self.db.commit()
            self.db.refresh(row)
        except IntegrityError as e:
            self.db.rollback()
            raise WriteConflict(
                f"Progress write rejected: {e.orig}",
                user_id=record.user_id,
                subject_id=record.subject_id,
            ) from e
        except OperationalError as e:
            self.db.rollback()
            raise UpstreamUnavailable(
                "Progress store unreachable",
                user_id=record.user_id,
                subject_id=record.subject_id,
            ) from e
        return row_to_record(row)


@dataclass
class SqlLeaderboardStore(LeaderboardStore):
    db: Session

    def fetch_synthetic_competitors(self) -> List[LeaderboardEntry]:
        try:
            rows = (
                self.db.query(LeaderboardCompetitor)
                .order_by(LeaderboardCompetitor.total_xp.desc())
                .all()
            )
        except OperationalError as e:
            self.db.rollback()
            raise UpstreamUnavailable("Leaderboard store unreachable") from e
        return [
            LeaderboardEntry(
                id=c.id,
                name=c.name,
                avatar=c.avatar_url,
                total_xp=int(c.total_xp or 0),
                current_streak=int(c.current_streak or 0),
                is_synthetic=bool(c.is_ai),
                personality_type=c.personality_type,
            )
            for c in rows
        ]


def parse_gate_questions(subject_id: str, raw: object) -> List[QuizQuestion]:
    """Validate stored GATE question JSON into the engine's quiz shape."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError("gate_questions must be a list", subject_id=subject_id)
    out: List[QuizQuestion] = []
    for idx, item in enumerate(raw):
        try:
            q = GateQuestionPayload.model_validate(item)
        except PydanticValidationError as e:
            logger.warning("malformed gate question subject=%s index=%s errors=%s", subject_id, idx, e.errors())
            raise ValidationError(
                f"Malformed quiz question at index {idx}", subject_id=subject_id
            ) from e
        out.append(QuizQuestion(options=tuple(q.options), correct_index=q.correct_answer))
    return out


@dataclass
class SqlContentStore(ContentStore):
    db: Session

    def fetch_quiz_questions(self, subject_id: str) -> List[QuizQuestion]:
        try:
            materials = (
                self.db.query(SubjectMaterial)
                .filter(SubjectMaterial.subject_id == subject_id)
                .first()
            )
        except OperationalError as e:
            self.db.rollback()
            raise UpstreamUnavailable("Content store unreachable", subject_id=subject_id) from e
        if materials is None:
            raise NotFound(f"No materials for subject {subject_id}", subject_id=subject_id)
        return parse_gate_questions(subject_id, materials.gate_questions)


@dataclass
class SqlAchievementStore(AchievementStore):
    db: Session

    def fetch_achievements(self, user_id: str) -> List[Achievement]:
        try:
            rows = (
                self.db.query(UserAchievement)
                .filter(UserAchievement.user_id == user_id)
                .order_by(UserAchievement.earned_at.desc())
                .all()
            )
        except OperationalError as e:
            self.db.rollback()
            raise UpstreamUnavailable("Achievement store unreachable", user_id=user_id) from e
        return [
            Achievement(
                achievement_type=a.achievement_type,
                title=a.title,
                description=a.description,
                xp_reward=int(a.xp_reward or 0),
                earned_at=from_db_time(a.earned_at),
            )
            for a in rows
        ]

    def add_achievements(self, user_id: str, achievements: List[Achievement]) -> None:
        try:
            for a in achievements:
                self.db.add(
                    UserAchievement(
                        id=str(uuid4()),
                        user_id=user_id,
                        achievement_type=a.achievement_type,
                        title=a.title,
                        description=a.description,
                        xp_reward=a.xp_reward,
                        earned_at=to_db_time(a.earned_at) or datetime.utcnow(),
                    )
                )
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise WriteConflict(f"Achievement write rejected: {e.orig}", user_id=user_id) from e
        except OperationalError as e:
            self.db.rollback()
            raise UpstreamUnavailable("Achievement store unreachable", user_id=user_id) from e
