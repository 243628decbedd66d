"""Unit tests for the event -> next-record computation."""
from dataclasses import replace

import pytest

from progress_engine.delta import (
    COMPLETION_THRESHOLD,
    compute_next_record,
    proposed_percentage,
    quiz_percentage,
    validate_event,
)
from progress_engine.errors import ValidationError
from progress_engine.types import EventKind, LearningEvent, ProgressRecord, ProgressStatus


def fresh():
    return ProgressRecord.empty("u1", "sub-x")


@pytest.mark.unit
class TestQuizPercentage:
    def test_all_correct(self):
        assert quiz_percentage(5, 5) == 100

    def test_rounds_half_up(self):
        assert quiz_percentage(1, 8) == 13
        assert quiz_percentage(2, 3) == 67

    def test_rounds_down_below_half(self):
        assert quiz_percentage(1, 3) == 33

    def test_zero_correct(self):
        assert quiz_percentage(0, 4) == 0


@pytest.mark.unit
class TestValidateEvent:
    def test_unknown_kind(self):
        with pytest.raises(ValidationError):
            validate_event(LearningEvent(kind="teleport"))

    @pytest.mark.parametrize("pct", [-1, 101, None, 50.5, True])
    def test_bad_percentage(self, pct):
        with pytest.raises(ValidationError):
            validate_event(LearningEvent(kind=EventKind.VIEW_SYLLABUS_SECTION, percentage=pct))

    @pytest.mark.parametrize("correct,total", [(1, 0), (6, 5), (-1, 5), (None, 5), (True, 1), (1, True), (True, True)])
    def test_bad_quiz_counts(self, correct, total):
        with pytest.raises(ValidationError):
            validate_event(LearningEvent.answer_quiz_batch(correct, total))

    def test_valid_events_pass(self):
        validate_event(LearningEvent.open_materials())
        validate_event(LearningEvent.answer_quiz_batch(0, 3))
        validate_event(LearningEvent.view_syllabus_section(0))
        validate_event(LearningEvent.explicit_progress(100, confirm_completion=True))


@pytest.mark.unit
class TestProposedPercentage:
    def test_open_materials_first_open_adds_increment(self):
        assert proposed_percentage(fresh(), LearningEvent.open_materials()) == 15

    def test_open_materials_repeat_keeps_stored(self):
        current = replace(fresh(), completion_percentage=40)
        assert proposed_percentage(current, LearningEvent.open_materials(first_open=False)) == 40

    def test_custom_increment(self):
        assert proposed_percentage(fresh(), LearningEvent.open_materials(), open_materials_increment=20) == 20


@pytest.mark.unit
class TestComputeNextRecord:
    def test_first_open_starts_subject(self, fixed_now):
        nxt = compute_next_record(fresh(), LearningEvent.open_materials(), now=fixed_now)
        assert nxt.status is ProgressStatus.IN_PROGRESS
        assert nxt.completion_percentage == 15
        assert nxt.xp_points == 15
        assert nxt.study_streak == 1
        assert nxt.last_activity == fixed_now

    def test_repeat_open_on_fresh_record_stays_not_started(self, fixed_now):
        nxt = compute_next_record(fresh(), LearningEvent.open_materials(first_open=False), now=fixed_now)
        assert nxt.status is ProgressStatus.NOT_STARTED
        assert nxt.completion_percentage == 0
        assert nxt.study_streak == 0

    def test_percentage_never_decreases(self, fixed_now):
        current = replace(fresh(), status=ProgressStatus.IN_PROGRESS, completion_percentage=60, xp_points=60)
        nxt = compute_next_record(current, LearningEvent.view_syllabus_section(30), now=fixed_now)
        assert nxt.completion_percentage == 60
        assert nxt.xp_points == 60

    def test_automated_events_cap_at_threshold(self, fixed_now):
        nxt = compute_next_record(fresh(), LearningEvent.view_syllabus_section(100), now=fixed_now)
        assert nxt.completion_percentage == COMPLETION_THRESHOLD
        assert nxt.status is ProgressStatus.IN_PROGRESS

    def test_explicit_progress_without_confirmation_is_capped(self, fixed_now):
        nxt = compute_next_record(fresh(), LearningEvent.explicit_progress(100), now=fixed_now)
        assert nxt.completion_percentage == COMPLETION_THRESHOLD
        assert nxt.status is ProgressStatus.IN_PROGRESS

    def test_explicit_progress_does_not_count_toward_streak(self, fixed_now):
        nxt = compute_next_record(fresh(), LearningEvent.explicit_progress(50), now=fixed_now)
        assert nxt.study_streak == 0

    def test_confirmation_completes(self, fixed_now):
        current = replace(
            fresh(),
            status=ProgressStatus.IN_PROGRESS,
            completion_percentage=99,
            xp_points=99,
            gate_questions_completed=True,
        )
        nxt = compute_next_record(
            current, LearningEvent.explicit_progress(100, confirm_completion=True), now=fixed_now
        )
        assert nxt.status is ProgressStatus.COMPLETED
        assert nxt.completion_percentage == 100
        assert nxt.xp_points == 100

    def test_completed_record_is_sticky(self, fixed_now):
        current = replace(
            fresh(), status=ProgressStatus.COMPLETED, completion_percentage=100, xp_points=100, study_streak=3
        )
        nxt = compute_next_record(current, LearningEvent.answer_quiz_batch(1, 5), now=fixed_now)
        assert nxt.status is ProgressStatus.COMPLETED
        assert nxt.completion_percentage == 100
        assert nxt.xp_points == 100
        assert nxt.study_streak == 4

    def test_gate_latches_on_all_correct(self, fixed_now):
        nxt = compute_next_record(fresh(), LearningEvent.answer_quiz_batch(5, 5), now=fixed_now)
        assert nxt.gate_questions_completed is True
        again = compute_next_record(nxt, LearningEvent.answer_quiz_batch(4, 5), now=fixed_now)
        assert again.gate_questions_completed is True

    def test_partial_quiz_leaves_gate_unset(self, fixed_now):
        nxt = compute_next_record(fresh(), LearningEvent.answer_quiz_batch(4, 5), now=fixed_now)
        assert nxt.gate_questions_completed is False
        assert nxt.completion_percentage == 80

    def test_deferral_kept_until_gate_newly_latches(self, fixed_now):
        deferred = replace(
            fresh(),
            status=ProgressStatus.IN_PROGRESS,
            completion_percentage=99,
            xp_points=99,
            completion_deferred=True,
        )
        kept = compute_next_record(deferred, LearningEvent.view_syllabus_section(100), now=fixed_now)
        assert kept.completion_deferred is True
        cleared = compute_next_record(deferred, LearningEvent.answer_quiz_batch(5, 5), now=fixed_now)
        assert cleared.completion_deferred is False

    def test_rejects_corrupt_stored_record(self, fixed_now):
        corrupt = replace(fresh(), xp_points=-3)
        with pytest.raises(ValidationError):
            compute_next_record(corrupt, LearningEvent.open_materials(), now=fixed_now)

    def test_input_record_is_not_mutated(self, fixed_now):
        current = fresh()
        compute_next_record(current, LearningEvent.view_syllabus_section(40), now=fixed_now)
        assert current == fresh()
