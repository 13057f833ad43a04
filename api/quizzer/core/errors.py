from __future__ import annotations

from typing import Optional


class QuizzerError(Exception):
    """
    Base for every error that is reported back to a client.
    `kind` is the stable machine-readable tag put on error frames and 400 bodies.
    """

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"message": self.message, "kind": self.kind}


class TranscriptUnavailable(QuizzerError):
    kind = "transcript_unavailable"


class InvalidSegment(QuizzerError):
    kind = "invalid_segment"


class CompletionUnavailable(QuizzerError):
    kind = "completion_unavailable"

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TimeoutExceeded(QuizzerError):
    kind = "timeout_exceeded"


class InvalidFrame(QuizzerError):
    kind = "invalid_frame"


class IllegalState(QuizzerError):
    kind = "illegal_state"
