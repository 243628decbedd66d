"""
Achievement unlocks derived from a user's progress records and leaderboard rank.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from progress_engine.types import Achievement, ProgressRecord, ProgressStatus


@dataclass(frozen=True)
class AchievementRule:
    achievement_type: str
    title: str
    description: str
    xp_reward: int
    check: Callable[[List[ProgressRecord], int], bool]

    def award(self, now: datetime) -> Achievement:
        return Achievement(
            achievement_type=self.achievement_type,
            title=self.title,
            description=self.description,
            xp_reward=self.xp_reward,
            earned_at=now,
        )


def _any_streak(n: int) -> Callable[[List[ProgressRecord], int], bool]:
    return lambda records, _rank: any(r.study_streak >= n for r in records)


ACHIEVEMENT_RULES: List[AchievementRule] = [
    AchievementRule(
        "first_subject",
        "First Subject Mastered",
        "Completed your first subject.",
        100,
        lambda records, _rank: any(r.status is ProgressStatus.COMPLETED for r in records),
    ),
    AchievementRule("streak_7", "Week Warrior", "Reached a 7-action study streak.", 50, _any_streak(7)),
    AchievementRule("streak_30", "Unstoppable", "Reached a 30-action study streak.", 200, _any_streak(30)),
    AchievementRule(
        "top_performer",
        "Top Performer",
        "Ranked first on the leaderboard.",
        150,
        lambda _records, rank: rank == 1,
    ),
    AchievementRule(
        "gate_master",
        "GATE Master",
        "Answered every GATE question of a subject correctly.",
        75,
        lambda records, _rank: any(r.gate_questions_completed for r in records),
    ),
]


def evaluate_achievements(
    records: List[ProgressRecord],
    user_rank: int,
    earned: Iterable[str],
    *,
    now: datetime,
    rules: Optional[List[AchievementRule]] = None,
) -> List[Achievement]:
    """Achievements newly satisfied; already-earned types are never re-awarded."""
    have = set(earned)
    return [
        rule.award(now)
        for rule in (rules or ACHIEVEMENT_RULES)
        if rule.achievement_type not in have and rule.check(records, user_rank)
    ]
