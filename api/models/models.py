from api.config import Base
from sqlalchemy import (
    Column,
    Integer,
    String,
    JSON,
    DateTime,
    ForeignKey,
    Text,
    Boolean,
    CheckConstraint,
    UniqueConstraint,
)
from sqlalchemy.orm import backref, relationship
from datetime import datetime


class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, index=True)  # uuid
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    display_name = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


# ----- Catalog (read-only reference data) -----

class University(Base):
    __tablename__ = "universities"
    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    short_name = Column(String, nullable=True)
    location = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    departments = relationship("Department", backref="university", cascade="all, delete-orphan")


class Department(Base):
    __tablename__ = "departments"
    id = Column(String, primary_key=True, index=True)
    university_id = Column(String, ForeignKey("universities.id"), index=True, nullable=False)
    name = Column(String, nullable=False)
    code = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    semesters = relationship("Semester", backref="department", cascade="all, delete-orphan")


class Semester(Base):
    __tablename__ = "semesters"
    id = Column(String, primary_key=True, index=True)
    department_id = Column(String, ForeignKey("departments.id"), index=True, nullable=False)
    number = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    subjects = relationship("Subject", backref="semester", cascade="all, delete-orphan")


class Subject(Base):
    __tablename__ = "subjects"
    id = Column(String, primary_key=True, index=True)
    semester_id = Column(String, ForeignKey("semesters.id"), index=True, nullable=False)
    name = Column(String, nullable=False)
    code = Column(String, nullable=False)
    credits = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    materials = relationship("SubjectMaterial", backref="subject", uselist=False, cascade="all, delete-orphan")


class UserProfile(Base):
    """Academic placement of a user; one row per user, created on first save."""
    __tablename__ = "user_profiles"
    user_id = Column(String, ForeignKey("users.id"), primary_key=True, index=True)
    university_id = Column(String, ForeignKey("universities.id"), nullable=True)
    department_id = Column(String, ForeignKey("departments.id"), nullable=True)
    semester_id = Column(String, ForeignKey("semesters.id"), nullable=True)
    profile_completed = Column(Boolean, default=False, nullable=False)
    phone_number = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    profile_image = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", backref=backref("profile", uselist=False), foreign_keys=[user_id])
    university = relationship("University", foreign_keys=[university_id])
    department = relationship("Department", foreign_keys=[department_id])
    semester = relationship("Semester", foreign_keys=[semester_id])


# ----- Content (opaque payloads) -----

class SubjectMaterial(Base):
    __tablename__ = "subject_materials"
    id = Column(String, primary_key=True, index=True)
    subject_id = Column(String, ForeignKey("subjects.id"), unique=True, index=True, nullable=False)
    syllabus = Column(Text, nullable=True)
    syllabus_json = Column(JSON, nullable=True)
    drive_link = Column(String, nullable=True)
    gate_questions = Column(JSON, nullable=True)  # list of {question, options, correct_answer, ...}
    dpp_materials = Column(JSON, nullable=True)
    related_posts = Column(JSON, nullable=True)
    video_resources = Column(JSON, nullable=True)
    practice_tests = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)


# ----- Progress & gamification -----

class UserProgress(Base):
    __tablename__ = "user_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "subject_id", name="uq_user_progress_user_subject"),
        CheckConstraint(
            "completion_percentage >= 0 AND completion_percentage <= 100",
            name="ck_user_progress_percentage",
        ),
        CheckConstraint("xp_points >= 0", name="ck_user_progress_xp"),
        CheckConstraint("study_streak >= 0", name="ck_user_progress_streak"),
    )
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(String, ForeignKey("users.id"), index=True, nullable=False)
    subject_id = Column(String, ForeignKey("subjects.id"), index=True, nullable=False)
    status = Column(String, nullable=False, default="not_started")  # not_started|in_progress|completed
    completion_percentage = Column(Integer, default=0, nullable=False)
    xp_points = Column(Integer, default=0, nullable=False)
    study_streak = Column(Integer, default=0, nullable=False)
    gate_questions_completed = Column(Boolean, default=False, nullable=False)
    completion_deferred = Column(Boolean, default=False, nullable=False)
    last_activity = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", backref="progress", foreign_keys=[user_id])


class LeaderboardCompetitor(Base):
    __tablename__ = "leaderboard_competitors"
    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    avatar_url = Column(String, nullable=True)
    total_xp = Column(Integer, default=0, nullable=False)
    current_streak = Column(Integer, default=0, nullable=False)
    is_ai = Column(Boolean, default=True, nullable=False)
    personality_type = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class UserAchievement(Base):
    __tablename__ = "user_achievements"
    __table_args__ = (
        UniqueConstraint("user_id", "achievement_type", name="uq_user_achievement_type"),
    )
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(String, ForeignKey("users.id"), index=True, nullable=False)
    achievement_type = Column(String, nullable=False)  # first_subject|streak_7|streak_30|top_performer|gate_master
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    xp_reward = Column(Integer, default=0, nullable=False)
    earned_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", backref="achievements", foreign_keys=[user_id])
