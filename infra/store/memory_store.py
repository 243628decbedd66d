"""
In-memory implementations of the progress engine store contracts.

Used by unit tests and local experiments; nothing is persisted.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from progress_engine.errors import NotFound, UpstreamUnavailable
from progress_engine.store import AchievementStore, ContentStore, LeaderboardStore, ProgressStore
from progress_engine.types import Achievement, LeaderboardEntry, ProgressRecord, QuizQuestion


class InMemoryProgressStore(ProgressStore):
    """Dict keyed by (user_id, subject_id). Set `fail_writes` to simulate an outage."""

    def __init__(self, records: Optional[List[ProgressRecord]] = None):
        self._records: Dict[Tuple[str, str], ProgressRecord] = {}
        self.fail_writes: Optional[Exception] = None
        self.writes = 0
        for r in records or []:
            self._records[r.key] = r

    def fetch_progress(self, user_id: str) -> List[ProgressRecord]:
        return [r for (uid, _), r in self._records.items() if uid == user_id]

    def upsert_progress(self, record: ProgressRecord) -> ProgressRecord:
        if self.fail_writes is not None:
            raise self.fail_writes
        self._records[record.key] = record
        self.writes += 1
        return record


class InMemoryLeaderboardStore(LeaderboardStore):
    def __init__(self, competitors: Optional[List[LeaderboardEntry]] = None):
        self._competitors = list(competitors or [])
        self.available = True

    def fetch_synthetic_competitors(self) -> List[LeaderboardEntry]:
        if not self.available:
            raise UpstreamUnavailable("Leaderboard store unreachable")
        return list(self._competitors)


class InMemoryContentStore(ContentStore):
    def __init__(self, questions: Optional[Dict[str, List[QuizQuestion]]] = None):
        self._questions = dict(questions or {})

    def fetch_quiz_questions(self, subject_id: str) -> List[QuizQuestion]:
        if subject_id not in self._questions:
            raise NotFound(f"No content for subject {subject_id}", subject_id=subject_id)
        return list(self._questions[subject_id])


class InMemoryAchievementStore(AchievementStore):
    def __init__(self):
        self._earned: Dict[str, List[Achievement]] = {}

    def fetch_achievements(self, user_id: str) -> List[Achievement]:
        return list(self._earned.get(user_id, []))

    def add_achievements(self, user_id: str, achievements: List[Achievement]) -> None:
        self._earned.setdefault(user_id, []).extend(achievements)
