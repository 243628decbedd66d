"""
API data models. Single import surface for DB entities.

Account (api.models.models):
- User, UserProfile

Catalog and content:
- University, Department, Semester, Subject, SubjectMaterial

Progress and gamification:
- UserProgress, LeaderboardCompetitor, UserAchievement
"""

from api.models.models import (
    User,
    University,
    Department,
    Semester,
    Subject,
    SubjectMaterial,
    UserProfile,
    UserProgress,
    LeaderboardCompetitor,
    UserAchievement,
)

__all__ = [
    "User",
    "University",
    "Department",
    "Semester",
    "Subject",
    "SubjectMaterial",
    "UserProfile",
    "UserProgress",
    "LeaderboardCompetitor",
    "UserAchievement",
]
