#!/usr/bin/env python3
"""
Seed the portal database with a small catalog, subject content and the
synthetic leaderboard competitors.

Run: python scripts/seed_portal.py
     python scripts/seed_portal.py --reset

Uses DATABASE_URL from the environment / .env (defaults to the local SQLite file).
Existing rows are left alone, so the script can be re-run safely.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

_project_root = Path(__file__).resolve().parent.parent
for p in (_project_root, _project_root / "src"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from sqlalchemy.orm import Session  # noqa: E402

COMPETITORS = [
    # (id, name, total_xp, current_streak, personality)
    ("ai-aarav", "Aarav", 1250, 12, "consistent"),
    ("ai-meera", "Meera", 980, 9, "sprinter"),
    ("ai-kabir", "Kabir", 640, 5, "night_owl"),
    ("ai-zara", "Zara", 410, 3, "casual"),
    ("ai-ishaan", "Ishaan", 150, 1, "newcomer"),
]

GATE_QUESTIONS = [
    {
        "question": "Which data structure gives O(1) average lookup by key?",
        "options": ["Linked list", "Hash table", "Binary heap", "Stack"],
        "correct_answer": 1,
        "explanation": "Hashing maps keys to buckets directly.",
        "difficulty": "easy",
        "year": 2021,
    },
    {
        "question": "Worst-case time of quicksort on n items?",
        "options": ["O(n)", "O(n log n)", "O(n^2)", "O(log n)"],
        "correct_answer": 2,
        "explanation": "Consistently bad pivots degrade to quadratic time.",
        "difficulty": "medium",
        "year": 2019,
    },
    {
        "question": "A full binary tree with 7 internal nodes has how many leaves?",
        "options": ["6", "7", "8", "14"],
        "correct_answer": 2,
        "explanation": "Leaves = internal nodes + 1.",
        "difficulty": "medium",
        "year": 2020,
    },
]


def seed(db: Session) -> dict:
    from api.models.models import (
        Department,
        LeaderboardCompetitor,
        Semester,
        Subject,
        SubjectMaterial,
        University,
    )

    created = {"competitors": 0, "subjects": 0}

    if db.query(University).filter(University.id == "uni-demo").first() is None:
        db.add(University(id="uni-demo", name="Demo Technical University", short_name="DTU", location="Campus City"))
        db.add(Department(id="dept-cse", university_id="uni-demo", name="Computer Science", code="CSE"))
        db.add(Semester(id="sem-cse-3", department_id="dept-cse", number=3))
        db.flush()

    for sid, name, code in (
        ("sub-dsa", "Data Structures", "CS301"),
        ("sub-dbms", "Database Systems", "CS302"),
    ):
        if db.query(Subject).filter(Subject.id == sid).first() is not None:
            continue
        db.add(Subject(id=sid, semester_id="sem-cse-3", name=name, code=code, credits=4))
        db.add(
            SubjectMaterial(
                id=f"mat-{sid}",
                subject_id=sid,
                syllabus=f"{name} syllabus",
                syllabus_json={"sections": []},
                gate_questions=GATE_QUESTIONS if sid == "sub-dsa" else [],
                dpp_materials=[],
                related_posts=[],
                video_resources=[],
                practice_tests=[],
            )
        )
        created["subjects"] += 1

    for cid, name, xp, streak, personality in COMPETITORS:
        if db.query(LeaderboardCompetitor).filter(LeaderboardCompetitor.id == cid).first() is not None:
            continue
        db.add(
            LeaderboardCompetitor(
                id=cid,
                name=name,
                total_xp=xp,
                current_streak=streak,
                is_ai=True,
                personality_type=personality,
            )
        )
        created["competitors"] += 1

    db.commit()
    return created


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed catalog, content and leaderboard competitors.")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables first.")
    args = parser.parse_args()

    from api.config import SessionLocal, create_db, reset_db

    if args.reset:
        reset_db()
    else:
        create_db()

    db = SessionLocal()
    try:
        created = seed(db)
    finally:
        db.close()
    print(f"Seeded subjects={created['subjects']} competitors={created['competitors']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
