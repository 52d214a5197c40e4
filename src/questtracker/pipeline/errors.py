"""Pipeline error types."""

from __future__ import annotations


class LoadAbortedError(Exception):
    """Raised when a load cannot proceed and no partial dataset may be exposed.

    Attributes:
        stage: Pipeline step that failed (e.g. ``first_page``).
        reason: Human-readable cause.
    """

    def __init__(self, stage: str, reason: str) -> None:
        self.stage = stage
        self.reason = reason
        super().__init__(f"Quest load aborted at {stage}: {reason}")
