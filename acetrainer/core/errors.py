"""
Error kinds raised by the acetrainer core.

None of these are fatal to the process: callers either report them
(InvalidSessionResult), log them (PersistenceFailure) or drop the offending
record (MalformedContent).
"""

from __future__ import annotations


class AceTrainerError(Exception):
    """Base class for all acetrainer errors."""


class InvalidSessionResult(AceTrainerError):
    """Raised when a finished session reports an impossible score/total."""

    def __init__(self, score: int, total: int):
        self.score = score
        self.total = total
        super().__init__(f"Invalid session result: score={score}, total={total}")


class PersistenceFailure(AceTrainerError):
    """Raised by byte stores when the progress record cannot be written."""


class MalformedContent(AceTrainerError):
    """Raised when a content record is missing required fields."""

    def __init__(self, record: object, reason: str):
        self.record = record
        self.reason = reason
        super().__init__(f"Malformed content record: {reason}")
