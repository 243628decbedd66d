"""
Pytest configuration and shared fixtures for the test suite.
Ensures proper Python path and provides common fixtures for unit and integration tests.
"""
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root and src to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))
src_path = project_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

# Importing api.api creates tables on the configured database; keep that off disk.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")


@pytest.fixture
def fixed_now():
    return datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def gate_questions():
    """Five stored GATE questions; the right answer of question i is i % 4."""
    return [
        {
            "question": f"Question {i + 1}",
            "options": ["A", "B", "C", "D"],
            "correct_answer": i % 4,
            "difficulty": "medium",
            "year": 2020 + i,
        }
        for i in range(5)
    ]


@pytest.fixture
def right_answers():
    return [i % 4 for i in range(5)]


# ----- In-memory DB (for tests that need DB without touching real DB) -----
@pytest.fixture
def in_memory_engine():
    """Create an in-memory SQLite engine for tests."""
    return create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def db_session(in_memory_engine):
    """Create an in-memory database session. Uses api.models.Base for schema."""
    from api.models.models import Base
    Base.metadata.create_all(in_memory_engine)
    SessionLocal = sessionmaker(bind=in_memory_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def seed_catalog(gate_questions):
    """Returns a function that adds a catalog with subjects sub-dsa and sub-os."""
    from api.models.models import Department, Semester, Subject, SubjectMaterial, University

    def _seed(db, questions=None):
        questions = gate_questions if questions is None else questions
        db.add(University(id="uni-test", name="Test University", short_name="TU"))
        db.add(Department(id="dept-test", university_id="uni-test", name="Computer Science", code="CSE"))
        db.add(Semester(id="sem-test", department_id="dept-test", number=3))
        for sid, name in (("sub-dsa", "Data Structures"), ("sub-os", "Operating Systems")):
            db.add(Subject(id=sid, semester_id="sem-test", name=name, code=sid.upper(), credits=4))
            db.add(
                SubjectMaterial(
                    id=f"mat-{sid}",
                    subject_id=sid,
                    syllabus=f"{name} syllabus",
                    syllabus_json={"sections": ["intro"]},
                    gate_questions=list(questions),
                    dpp_materials=[],
                    related_posts=[],
                    video_resources=[{"title": "Lecture 1"}],
                    practice_tests=[],
                )
            )
        db.commit()

    return _seed


@pytest.fixture
def seed_competitors():
    """Returns a function that adds synthetic competitors with the given XP totals."""
    from api.models.models import LeaderboardCompetitor

    def _seed(db, xps=(500, 300, 100)):
        for i, xp in enumerate(xps):
            db.add(
                LeaderboardCompetitor(
                    id=f"ai-{i}",
                    name=f"Bot {i}",
                    total_xp=xp,
                    current_streak=i + 1,
                    is_ai=True,
                    personality_type="consistent",
                )
            )
        db.commit()

    return _seed


@pytest.fixture
def test_subject(db_session, seed_catalog):
    """Catalog plus materials for sub-dsa and sub-os; returns sub-dsa."""
    from api.models.models import Subject
    seed_catalog(db_session)
    return db_session.query(Subject).filter(Subject.id == "sub-dsa").first()
