"""Domain errors raised by the service layer.

Endpoints translate these to ``HTTPException`` using ``status_code``.
"""

from __future__ import annotations

from fastapi import status

from tribuna.core import messages


class VotingError(RuntimeError):
    """Base class for rejected vote submissions."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TopicLockedError(VotingError):
    """Raised when a vote targets a locked topic."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self) -> None:
        super().__init__(messages.TOPIC_LOCKED_FOR_VOTING)


class InvalidOptionsError(VotingError):
    """Raised when submitted option ids do not all belong to the topic."""

    def __init__(self) -> None:
        super().__init__(messages.INVALID_OPTIONS)


class ChoiceLimitError(VotingError):
    """Raised when a submission exceeds the topic's choice rules."""


class VoteShapeError(VotingError):
    """Raised when the request body does not match the topic type."""

    def __init__(self) -> None:
        super().__init__(messages.INVALID_DATA)
