"""
Error taxonomy for the progress engine.

Every error carries the event context (user, subject, event kind) so callers
and logs can tell which action failed.
"""

from __future__ import annotations

from typing import Optional


class ProgressEngineError(Exception):
    def __init__(
        self,
        message: str,
        *,
        user_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        event_kind: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.subject_id = subject_id
        self.event_kind = event_kind

    def with_context(
        self,
        *,
        user_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        event_kind: Optional[str] = None,
    ) -> "ProgressEngineError":
        """Fill in context fields that are still unset and return self."""
        self.user_id = self.user_id or user_id
        self.subject_id = self.subject_id or subject_id
        self.event_kind = self.event_kind or event_kind
        return self

    def context(self) -> dict:
        return {
            "user_id": self.user_id,
            "subject_id": self.subject_id,
            "event_kind": self.event_kind,
        }


class NotFound(ProgressEngineError):
    """A requested collaborator entity (subject, content) does not exist."""


class WriteConflict(ProgressEngineError):
    """The store rejected the upsert (constraint violation)."""


class ValidationError(ProgressEngineError):
    """Input rejected before any store call."""


class UpstreamUnavailable(ProgressEngineError):
    """A collaborator store could not be reached."""
