"""
Unit test fixtures. In-memory stores only; no real DB.
"""
import pytest

from infra.store.memory_store import (
    InMemoryAchievementStore,
    InMemoryContentStore,
    InMemoryLeaderboardStore,
    InMemoryProgressStore,
)
from progress_engine.engine import ProgressEngine
from progress_engine.types import LeaderboardEntry, QuizQuestion


@pytest.fixture
def quiz_questions():
    return [QuizQuestion(options=("A", "B", "C", "D"), correct_index=i % 4) for i in range(5)]


@pytest.fixture
def competitors():
    return [
        LeaderboardEntry(id=f"ai-{i}", name=f"Bot {i}", total_xp=xp, current_streak=i)
        for i, xp in enumerate((500, 300, 100))
    ]


@pytest.fixture
def progress_store():
    return InMemoryProgressStore()


@pytest.fixture
def leaderboard_store(competitors):
    return InMemoryLeaderboardStore(competitors)


@pytest.fixture
def content_store(quiz_questions):
    return InMemoryContentStore({"sub-x": quiz_questions, "sub-y": quiz_questions, "sub-empty": []})


@pytest.fixture
def achievement_store():
    return InMemoryAchievementStore()


@pytest.fixture
def engine(progress_store, leaderboard_store, content_store, achievement_store, fixed_now):
    return ProgressEngine(
        progress_store=progress_store,
        leaderboard_store=leaderboard_store,
        content_store=content_store,
        achievement_store=achievement_store,
        clock=lambda: fixed_now,
    )
