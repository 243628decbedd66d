"""
Subject content schemas.

Content payloads (syllabus, DPP chapters, videos, practice tests) are passed
through untouched. Only GATE questions are validated, because the progress
engine scores them.
"""

from pydantic import BaseModel, model_validator
from typing import Any, Optional


class GateQuestionPayload(BaseModel):
    """Stored shape of one GATE question; extra keys are kept but ignored."""
    question: Optional[str] = None
    options: list[str]
    correct_answer: int
    explanation: Optional[str] = None
    difficulty: Optional[str] = None
    year: Optional[int] = None

    @model_validator(mode="after")
    def _answer_in_range(self) -> "GateQuestionPayload":
        if not self.options:
            raise ValueError("question has no options")
        if self.correct_answer < 0 or self.correct_answer >= len(self.options):
            raise ValueError(
                f"correct_answer {self.correct_answer} outside 0..{len(self.options) - 1}"
            )
        return self


class QuizQuestionPublic(BaseModel):
    """A question as shown to the student: no answer, no explanation."""
    index: int
    question: Optional[str] = None
    options: list[str]
    difficulty: Optional[str] = None
    year: Optional[int] = None


class QuizResponse(BaseModel):
    subject_id: str
    questions: list[QuizQuestionPublic]


class SubjectMaterialsResponse(BaseModel):
    subject_id: str
    syllabus: Optional[str] = None
    syllabus_json: Optional[Any] = None
    drive_link: Optional[str] = None
    question_count: int = 0
    dpp_materials: list[Any] = []
    related_posts: list[Any] = []
    video_resources: list[Any] = []
    practice_tests: list[Any] = []
    updated_at: Optional[str] = None
