from __future__ import annotations

from typing import Iterable, List, Optional

from progress_engine.types import LeaderboardEntry, LeaderboardView, ProgressRecord


def total_xp(records: Iterable[ProgressRecord]) -> int:
    return sum(r.xp_points for r in records)


def current_streak(records: Iterable[ProgressRecord]) -> int:
    """Best streak across the user's subjects (0 when there are none)."""
    return max((r.study_streak for r in records), default=0)


def user_entry(
    user_id: str,
    records: List[ProgressRecord],
    *,
    name: str = "You",
    avatar: Optional[str] = None,
) -> LeaderboardEntry:
    return LeaderboardEntry(
        id=user_id,
        name=name,
        avatar=avatar,
        total_xp=total_xp(records),
        current_streak=current_streak(records),
        is_synthetic=False,
        personality_type="user",
    )


def build_leaderboard(
    competitors: List[LeaderboardEntry],
    entry: LeaderboardEntry,
    *,
    limit: Optional[int] = None,
) -> LeaderboardView:
    """
    Append the live user to the synthetic list and rank by total XP.

    The sort is stable, so ties keep insertion order and the user, appended
    last, ranks below competitors with the same XP. `limit` only trims the
    returned entries; the rank is computed on the full list.
    """
    combined = [*competitors, entry]
    ranked = sorted(combined, key=lambda e: -e.total_xp)
    user_rank = next(i for i, e in enumerate(ranked, start=1) if e is entry)
    if limit is not None:
        ranked = ranked[:limit]
    return LeaderboardView(entries=ranked, user_rank=user_rank)
