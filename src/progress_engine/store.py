from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from progress_engine.types import Achievement, LeaderboardEntry, ProgressRecord, QuizQuestion


class ProgressStore(ABC):
    """
    Read-write store owned by the engine: one record per (user, subject).

    Infrastructure (SQL, in-memory) implements it; the engine never sees rows.
    """

    @abstractmethod
    def fetch_progress(self, user_id: str) -> List[ProgressRecord]:
        """All records for a user. Empty list when the user has none."""

        raise NotImplementedError

    @abstractmethod
    def upsert_progress(self, record: ProgressRecord) -> ProgressRecord:
        """
        Replace the record keyed by (user_id, subject_id) atomically and return
        what was stored.

        Raises WriteConflict on constraint violations and UpstreamUnavailable
        when the backend cannot be reached.
        """

        raise NotImplementedError


class LeaderboardStore(ABC):
    @abstractmethod
    def fetch_synthetic_competitors(self) -> List[LeaderboardEntry]:
        raise NotImplementedError


class ContentStore(ABC):
    """
    Read-only subject content. Only the quiz question shape is exposed; all
    other material payloads stay opaque to the engine.
    """

    @abstractmethod
    def fetch_quiz_questions(self, subject_id: str) -> List[QuizQuestion]:
        """
        Questions for a subject, validated to the {options, correct_index} shape.

        Raises NotFound when the subject has no content at all.
        """

        raise NotImplementedError


class AchievementStore(ABC):
    @abstractmethod
    def fetch_achievements(self, user_id: str) -> List[Achievement]:
        raise NotImplementedError

    @abstractmethod
    def add_achievements(self, user_id: str, achievements: List[Achievement]) -> None:
        raise NotImplementedError
