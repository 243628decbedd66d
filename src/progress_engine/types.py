from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class ProgressStatus(str, Enum):
    """Lifecycle of a (user, subject) progress record. Order matters."""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @property
    def order(self) -> int:
        return _STATUS_ORDER[self]


_STATUS_ORDER = {
    ProgressStatus.NOT_STARTED: 0,
    ProgressStatus.IN_PROGRESS: 1,
    ProgressStatus.COMPLETED: 2,
}


class EventKind(str, Enum):
    """Learning actions the engine knows how to score."""
    OPEN_MATERIALS = "open_materials"
    ANSWER_QUIZ_BATCH = "answer_quiz_batch"
    VIEW_SYLLABUS_SECTION = "view_syllabus_section"
    EXPLICIT_PROGRESS = "explicit_progress"


# Actions that count toward the study streak.
GENUINE_STUDY_EVENTS = frozenset(
    {
        EventKind.OPEN_MATERIALS,
        EventKind.ANSWER_QUIZ_BATCH,
        EventKind.VIEW_SYLLABUS_SECTION,
    }
)


class CompletionState(str, Enum):
    """Where a record sits in the completion-confirmation flow."""
    BELOW_THRESHOLD = "below_threshold"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    CONFIRMED_COMPLETE = "confirmed_complete"
    DEFERRED = "deferred"


@dataclass(frozen=True)
class LearningEvent:
    """
    A single learning action reported by a UI caller.

    Use the classmethod constructors; only the fields relevant to `kind` are read.
    """

    kind: EventKind
    first_open: bool = False
    correct_count: Optional[int] = None
    total_count: Optional[int] = None
    percentage: Optional[int] = None
    confirm_completion: bool = False

    @classmethod
    def open_materials(cls, first_open: bool = True) -> "LearningEvent":
        return cls(kind=EventKind.OPEN_MATERIALS, first_open=first_open)

    @classmethod
    def answer_quiz_batch(cls, correct_count: int, total_count: int) -> "LearningEvent":
        return cls(
            kind=EventKind.ANSWER_QUIZ_BATCH,
            correct_count=correct_count,
            total_count=total_count,
        )

    @classmethod
    def view_syllabus_section(cls, percentage: int) -> "LearningEvent":
        return cls(kind=EventKind.VIEW_SYLLABUS_SECTION, percentage=percentage)

    @classmethod
    def explicit_progress(cls, percentage: int, confirm_completion: bool = False) -> "LearningEvent":
        return cls(
            kind=EventKind.EXPLICIT_PROGRESS,
            percentage=percentage,
            confirm_completion=confirm_completion,
        )

    @property
    def is_confirmation(self) -> bool:
        return self.kind is EventKind.EXPLICIT_PROGRESS and self.confirm_completion


@dataclass(frozen=True)
class ProgressRecord:
    """One row of the Progress Store, keyed by (user_id, subject_id)."""

    user_id: str
    subject_id: str
    status: ProgressStatus = ProgressStatus.NOT_STARTED
    completion_percentage: int = 0
    xp_points: int = 0
    study_streak: int = 0
    gate_questions_completed: bool = False
    completion_deferred: bool = False
    last_activity: Optional[datetime] = None

    @classmethod
    def empty(cls, user_id: str, subject_id: str) -> "ProgressRecord":
        """Zero-state used when the store has no row for the pair yet."""
        return cls(user_id=user_id, subject_id=subject_id)

    @property
    def key(self) -> tuple[str, str]:
        return (self.user_id, self.subject_id)


@dataclass(frozen=True)
class QuizQuestion:
    options: tuple[str, ...]
    correct_index: int


@dataclass(frozen=True)
class LeaderboardEntry:
    name: str
    total_xp: int
    current_streak: int = 0
    avatar: Optional[str] = None
    is_synthetic: bool = True
    id: Optional[str] = None
    personality_type: Optional[str] = None


@dataclass(frozen=True)
class LeaderboardView:
    """Ranked leaderboard for one user; recomputed on every call."""

    entries: list[LeaderboardEntry]
    user_rank: int


@dataclass(frozen=True)
class Achievement:
    achievement_type: str
    title: str
    description: Optional[str] = None
    xp_reward: int = 0
    earned_at: Optional[datetime] = None


@dataclass(frozen=True)
class EventOutcome:
    """
    What the engine wrote for one event, plus derived flags for the caller.

    `prompt_confirmation` is True only on the event that moved the record into
    the awaiting-confirmation state.
    """

    record: ProgressRecord
    previous: ProgressRecord
    completion_state: CompletionState
    prompt_confirmation: bool = False
    unlocked: list[Achievement] = field(default_factory=list)

    @property
    def xp_gained(self) -> int:
        return self.record.xp_points - self.previous.xp_points
