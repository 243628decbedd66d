from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence

from progress_engine import completion
from progress_engine.achievements import evaluate_achievements
from progress_engine.delta import OPEN_MATERIALS_INCREMENT, compute_next_record
from progress_engine.errors import ProgressEngineError, ValidationError
from progress_engine.leaderboard import build_leaderboard, total_xp, user_entry
from progress_engine.store import AchievementStore, ContentStore, LeaderboardStore, ProgressStore
from progress_engine.types import (
    Achievement,
    EventOutcome,
    LeaderboardView,
    LearningEvent,
    ProgressRecord,
    ProgressStatus,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProgressEngine:
    """
    Decides what gets recorded for each learning action and aggregates the
    results into XP totals, leaderboard rank and achievements.

    One instance per user session: it keeps a read cache of fetched records,
    dropped after every write so the next read comes from the store. The user
    id is always passed explicitly; the engine holds no notion of a current user.
    """

    def __init__(
        self,
        *,
        progress_store: ProgressStore,
        leaderboard_store: LeaderboardStore,
        content_store: ContentStore,
        achievement_store: Optional[AchievementStore] = None,
        open_materials_increment: int = OPEN_MATERIALS_INCREMENT,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.progress_store = progress_store
        self.leaderboard_store = leaderboard_store
        self.content_store = content_store
        self.achievement_store = achievement_store
        self.open_materials_increment = open_materials_increment
        self.clock = clock
        self._cache: Dict[str, Dict[str, ProgressRecord]] = {}

    # ----- reads -----

    def fetch_progress(self, user_id: str) -> List[ProgressRecord]:
        return list(self._records_by_subject(user_id).values())

    def get_progress(self, user_id: str, subject_id: str) -> ProgressRecord:
        """Stored record, or the zero-state when the user never touched the subject."""
        found = self._records_by_subject(user_id).get(subject_id)
        return found if found is not None else ProgressRecord.empty(user_id, subject_id)

    def get_total_xp(self, user_id: str) -> int:
        return total_xp(self.fetch_progress(user_id))

    def get_leaderboard(
        self,
        user_id: str,
        *,
        name: str = "You",
        avatar: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> LeaderboardView:
        records = self.fetch_progress(user_id)
        try:
            competitors = self.leaderboard_store.fetch_synthetic_competitors()
        except ProgressEngineError as e:
            e.with_context(user_id=user_id)
            logger.error("leaderboard fetch failed user=%s error=%s", user_id, e.message)
            raise
        entry = user_entry(user_id, records, name=name, avatar=avatar)
        return build_leaderboard(competitors, entry, limit=limit)

    def get_achievements(self, user_id: str) -> List[Achievement]:
        if self.achievement_store is None:
            return []
        return self.achievement_store.fetch_achievements(user_id)

    def invalidate(self, user_id: str) -> None:
        self._cache.pop(user_id, None)

    # ----- writes -----

    def record_event(self, user_id: str, subject_id: str, event: LearningEvent) -> ProgressRecord:
        return self.apply_event(user_id, subject_id, event).record

    def apply_event(self, user_id: str, subject_id: str, event: LearningEvent) -> EventOutcome:
        kind = getattr(event.kind, "value", str(event.kind))
        current = self.get_progress(user_id, subject_id)
        try:
            if event.is_confirmation:
                completion.ensure_confirmable(current)
            proposed = compute_next_record(
                current,
                event,
                now=self.clock(),
                open_materials_increment=self.open_materials_increment,
            )
        except ValidationError as e:
            e.with_context(user_id=user_id, subject_id=subject_id, event_kind=kind)
            logger.warning(
                "event rejected user=%s subject=%s event=%s reason=%s",
                user_id, subject_id, kind, e.message,
            )
            raise
        if proposed.status is ProgressStatus.NOT_STARTED:
            # Nothing was learned; the row is created by the first event that starts the subject.
            logger.debug("no-op event user=%s subject=%s event=%s", user_id, subject_id, kind)
            return EventOutcome(
                record=current,
                previous=current,
                completion_state=completion.completion_state(current),
            )
        return self._persist(current, proposed, kind)

    def submit_quiz(
        self,
        user_id: str,
        subject_id: str,
        answers: Sequence[Optional[int]],
    ) -> EventOutcome:
        """Score answers against the subject's questions and record the batch."""
        kind = "answer_quiz_batch"
        try:
            questions = self.content_store.fetch_quiz_questions(subject_id)
            if not questions:
                raise ValidationError("Subject has no quiz questions")
            if len(answers) > len(questions):
                raise ValidationError(
                    f"Got {len(answers)} answers for {len(questions)} questions"
                )
        except ProgressEngineError as e:
            e.with_context(user_id=user_id, subject_id=subject_id, event_kind=kind)
            logger.warning(
                "quiz rejected user=%s subject=%s reason=%s", user_id, subject_id, e.message
            )
            raise
        correct = sum(1 for q, a in zip(questions, answers) if a == q.correct_index)
        logger.info(
            "quiz scored user=%s subject=%s correct=%s total=%s",
            user_id, subject_id, correct, len(questions),
        )
        return self.apply_event(
            user_id, subject_id, LearningEvent.answer_quiz_batch(correct, len(questions))
        )

    def confirm_completion(self, user_id: str, subject_id: str) -> EventOutcome:
        return self.apply_event(user_id, subject_id, completion.confirmation_event())

    def decline_completion(self, user_id: str, subject_id: str) -> EventOutcome:
        current = self.get_progress(user_id, subject_id)
        try:
            declined = completion.decline(current, now=self.clock())
        except ValidationError as e:
            e.with_context(event_kind="decline_completion")
            logger.warning(
                "decline rejected user=%s subject=%s reason=%s", user_id, subject_id, e.message
            )
            raise
        return self._persist(current, declined, "decline_completion")

    # ----- internals -----

    def _records_by_subject(self, user_id: str) -> Dict[str, ProgressRecord]:
        cached = self._cache.get(user_id)
        if cached is not None:
            return cached
        try:
            records = self.progress_store.fetch_progress(user_id)
        except ProgressEngineError as e:
            e.with_context(user_id=user_id)
            logger.error("progress fetch failed user=%s error=%s", user_id, e.message)
            raise
        by_subject = {r.subject_id: r for r in records}
        self._cache[user_id] = by_subject
        return by_subject

    def _persist(self, current: ProgressRecord, proposed: ProgressRecord, kind: str) -> EventOutcome:
        user_id, subject_id = proposed.user_id, proposed.subject_id
        try:
            saved = self.progress_store.upsert_progress(proposed)
        except ProgressEngineError as e:
            e.with_context(user_id=user_id, subject_id=subject_id, event_kind=kind)
            logger.error(
                "progress write failed user=%s subject=%s event=%s error=%s",
                user_id, subject_id, kind, e.message,
            )
            raise
        finally:
            # Whatever happened, the next read goes back to the store.
            self.invalidate(user_id)

        logger.info(
            "progress recorded user=%s subject=%s event=%s status=%s pct=%s->%s xp=%s->%s streak=%s",
            user_id, subject_id, kind, saved.status.value,
            current.completion_percentage, saved.completion_percentage,
            current.xp_points, saved.xp_points, saved.study_streak,
        )

        prompt = completion.entered_awaiting(current, saved)
        if prompt:
            logger.info("completion offer user=%s subject=%s", user_id, subject_id)

        return EventOutcome(
            record=saved,
            previous=current,
            completion_state=completion.completion_state(saved),
            prompt_confirmation=prompt,
            unlocked=self._unlock_achievements(user_id, subject_id, kind),
        )

    def _unlock_achievements(self, user_id: str, subject_id: str, kind: str) -> List[Achievement]:
        """
        Runs after the progress write has committed, so a failure here must not
        surface as a failed event: a retried event would be applied twice.
        Missed unlocks are picked up by the next successful evaluation.
        """
        if self.achievement_store is None:
            return []
        try:
            earned = {a.achievement_type for a in self.achievement_store.fetch_achievements(user_id)}
            view = self.get_leaderboard(user_id)
            unlocked = evaluate_achievements(
                self.fetch_progress(user_id), view.user_rank, earned, now=self.clock()
            )
            if unlocked:
                self.achievement_store.add_achievements(user_id, unlocked)
        except ProgressEngineError as e:
            e.with_context(user_id=user_id, subject_id=subject_id, event_kind=kind)
            logger.error(
                "achievement update skipped user=%s subject=%s event=%s error=%s: %s",
                user_id, subject_id, kind, type(e).__name__, e.message,
            )
            return []
        for a in unlocked:
            logger.info("achievement unlocked user=%s type=%s", user_id, a.achievement_type)
        return unlocked
