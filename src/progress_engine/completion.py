"""
Completion-confirmation state machine.

below_threshold -> awaiting_confirmation   event lands on 99 with the gate complete
awaiting_confirmation -> confirmed_complete  user accepts (explicit_progress(100))
awaiting_confirmation -> deferred            user declines, pinned at 99
deferred -> confirmed_complete               user accepts later
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from progress_engine.delta import COMPLETION_THRESHOLD, MAX_PERCENTAGE
from progress_engine.errors import ValidationError
from progress_engine.types import CompletionState, LearningEvent, ProgressRecord, ProgressStatus

CONFIRMABLE_STATES = frozenset(
    {
        CompletionState.AWAITING_CONFIRMATION,
        CompletionState.DEFERRED,
        CompletionState.CONFIRMED_COMPLETE,
    }
)


def completion_state(record: ProgressRecord) -> CompletionState:
    """Derive the state from persisted fields alone, so it survives a re-fetch."""
    if record.status is ProgressStatus.COMPLETED:
        return CompletionState.CONFIRMED_COMPLETE
    if record.completion_percentage >= COMPLETION_THRESHOLD:
        if record.completion_deferred:
            return CompletionState.DEFERRED
        if record.gate_questions_completed:
            return CompletionState.AWAITING_CONFIRMATION
    return CompletionState.BELOW_THRESHOLD


def entered_awaiting(previous: ProgressRecord, current: ProgressRecord) -> bool:
    return (
        completion_state(current) is CompletionState.AWAITING_CONFIRMATION
        and completion_state(previous) is not CompletionState.AWAITING_CONFIRMATION
    )


def confirmation_event() -> LearningEvent:
    return LearningEvent.explicit_progress(MAX_PERCENTAGE, confirm_completion=True)


def ensure_confirmable(record: ProgressRecord) -> None:
    state = completion_state(record)
    if state not in CONFIRMABLE_STATES:
        raise ValidationError(
            f"Completion has not been offered for this subject (state={state.value})",
            user_id=record.user_id,
            subject_id=record.subject_id,
        )


def decline(record: ProgressRecord, *, now: datetime) -> ProgressRecord:
    """User said "not yet": pin at the threshold and stop re-offering."""
    state = completion_state(record)
    if state is not CompletionState.AWAITING_CONFIRMATION:
        raise ValidationError(
            f"No completion offer is pending (state={state.value})",
            user_id=record.user_id,
            subject_id=record.subject_id,
        )
    return replace(
        record,
        status=ProgressStatus.IN_PROGRESS,
        completion_percentage=COMPLETION_THRESHOLD,
        completion_deferred=True,
        last_activity=now,
    )
