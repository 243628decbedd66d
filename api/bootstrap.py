from sqlalchemy.orm import Session

from api.config import settings
from infra.store.sql_store import (
    SqlAchievementStore,
    SqlContentStore,
    SqlLeaderboardStore,
    SqlProgressStore,
)
from progress_engine.engine import ProgressEngine


def build_engine(db: Session) -> ProgressEngine:
    """Wire a request-scoped ProgressEngine to the SQL stores sharing one session."""
    return ProgressEngine(
        progress_store=SqlProgressStore(db),
        leaderboard_store=SqlLeaderboardStore(db),
        content_store=SqlContentStore(db),
        achievement_store=SqlAchievementStore(db),
        open_materials_increment=settings.open_materials_increment,
    )
