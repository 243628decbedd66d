"""
Progress & gamification engine.

Modules:
    - types: records, events, leaderboard and achievement value types
    - delta: event -> next record computation
    - completion: completion-confirmation state machine
    - leaderboard: XP aggregation and ranking
    - achievements: unlock rules
    - store: collaborator contracts implemented by infrastructure
    - engine: ProgressEngine orchestrating the above
"""

from progress_engine.types import (
    Achievement,
    CompletionState,
    EventKind,
    EventOutcome,
    LeaderboardEntry,
    LeaderboardView,
    LearningEvent,
    ProgressRecord,
    ProgressStatus,
    QuizQuestion,
)
from progress_engine.delta import (
    COMPLETION_THRESHOLD,
    MAX_PERCENTAGE,
    OPEN_MATERIALS_INCREMENT,
    compute_next_record,
    quiz_percentage,
)
from progress_engine.completion import completion_state
from progress_engine.leaderboard import build_leaderboard, total_xp
from progress_engine.engine import ProgressEngine

__all__ = [
    "Achievement",
    "CompletionState",
    "EventKind",
    "EventOutcome",
    "LeaderboardEntry",
    "LeaderboardView",
    "LearningEvent",
    "ProgressRecord",
    "ProgressStatus",
    "QuizQuestion",
    "COMPLETION_THRESHOLD",
    "MAX_PERCENTAGE",
    "OPEN_MATERIALS_INCREMENT",
    "compute_next_record",
    "quiz_percentage",
    "completion_state",
    "build_leaderboard",
    "total_xp",
    "ProgressEngine",
]
