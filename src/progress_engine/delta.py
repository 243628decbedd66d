"""
Event -> next-record computation.

Pure functions: given the stored record and one learning event, produce the
record that should be persisted. No store access and no clock here; callers
pass `now`.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from progress_engine.errors import ValidationError
from progress_engine.types import (
    GENUINE_STUDY_EVENTS,
    EventKind,
    LearningEvent,
    ProgressRecord,
    ProgressStatus,
)

MAX_PERCENTAGE = 100
# Automated events stop here; only an explicit confirmation reaches 100.
COMPLETION_THRESHOLD = 99
OPEN_MATERIALS_INCREMENT = 15


def _is_count(value: object) -> bool:
    # bool is an int subclass; True must not pass as 1.
    return isinstance(value, int) and not isinstance(value, bool)


def validate_event(event: LearningEvent) -> None:
    """Reject malformed events before anything touches a store."""
    if not isinstance(event.kind, EventKind):
        raise ValidationError(f"Unknown event kind: {event.kind!r}")

    if event.kind is EventKind.ANSWER_QUIZ_BATCH:
        correct, total = event.correct_count, event.total_count
        if not _is_count(correct) or not _is_count(total):
            raise ValidationError("Quiz batch needs integer correct_count and total_count")
        if total <= 0:
            raise ValidationError("Quiz batch total_count must be positive")
        if correct < 0 or correct > total:
            raise ValidationError(f"Quiz batch correct_count {correct} outside 0..{total}")

    elif event.kind in (EventKind.VIEW_SYLLABUS_SECTION, EventKind.EXPLICIT_PROGRESS):
        pct = event.percentage
        if not _is_count(pct):
            raise ValidationError(f"{event.kind.value} needs an integer percentage")
        if pct < 0 or pct > MAX_PERCENTAGE:
            raise ValidationError(f"Percentage {pct} outside 0..{MAX_PERCENTAGE}")


def validate_record(record: ProgressRecord) -> None:
    if record.completion_percentage < 0 or record.completion_percentage > MAX_PERCENTAGE:
        raise ValidationError(
            f"Stored percentage {record.completion_percentage} outside 0..{MAX_PERCENTAGE}",
            user_id=record.user_id,
            subject_id=record.subject_id,
        )
    if record.xp_points < 0:
        raise ValidationError(
            f"Negative XP {record.xp_points}",
            user_id=record.user_id,
            subject_id=record.subject_id,
        )


def quiz_percentage(correct_count: int, total_count: int) -> int:
    """Score as a whole percentage, rounding halves up."""
    return (200 * correct_count + total_count) // (2 * total_count)


def proposed_percentage(
    current: ProgressRecord,
    event: LearningEvent,
    *,
    open_materials_increment: int = OPEN_MATERIALS_INCREMENT,
) -> int:
    kind = event.kind
    if kind is EventKind.OPEN_MATERIALS:
        if not event.first_open:
            return current.completion_percentage
        return current.completion_percentage + open_materials_increment
    if kind is EventKind.ANSWER_QUIZ_BATCH:
        return quiz_percentage(event.correct_count, event.total_count)
    return int(event.percentage)


def _later_status(a: ProgressStatus, b: ProgressStatus) -> ProgressStatus:
    return a if a.order >= b.order else b


def compute_next_record(
    current: ProgressRecord,
    event: LearningEvent,
    *,
    now: datetime,
    open_materials_increment: int = OPEN_MATERIALS_INCREMENT,
) -> ProgressRecord:
    """
    Apply one event to the stored record.

    - percentage only moves up, capped at COMPLETION_THRESHOLD unless the event
      is a completion confirmation, which forces MAX_PERCENTAGE
    - XP grows by the positive percentage delta only
    - status never moves backwards and only a confirmation yields `completed`
    - the gate flag latches on a fully-correct quiz batch
    """
    validate_event(event)
    validate_record(current)

    stored_pct = current.completion_percentage
    confirmed = event.is_confirmation

    if confirmed:
        new_pct = MAX_PERCENTAGE
    else:
        proposed = proposed_percentage(
            current, event, open_materials_increment=open_materials_increment
        )
        new_pct = max(stored_pct, min(COMPLETION_THRESHOLD, proposed))

    xp_delta = max(0, new_pct - stored_pct)

    if confirmed:
        candidate = ProgressStatus.COMPLETED
    elif new_pct > 0:
        candidate = ProgressStatus.IN_PROGRESS
    else:
        candidate = ProgressStatus.NOT_STARTED
    new_status = _later_status(current.status, candidate)

    streak = current.study_streak
    if event.kind in GENUINE_STUDY_EVENTS and new_status in (
        ProgressStatus.IN_PROGRESS,
        ProgressStatus.COMPLETED,
    ):
        streak += 1

    all_correct = (
        event.kind is EventKind.ANSWER_QUIZ_BATCH
        and event.correct_count == event.total_count
    )
    gate = current.gate_questions_completed or all_correct

    # A decline is only lifted by confirming, or by the gate newly latching.
    deferred = current.completion_deferred
    if confirmed or (gate and not current.gate_questions_completed):
        deferred = False

    return replace(
        current,
        status=new_status,
        completion_percentage=new_pct,
        xp_points=current.xp_points + xp_delta,
        study_streak=streak,
        gate_questions_completed=gate,
        completion_deferred=deferred,
        last_activity=now,
    )
