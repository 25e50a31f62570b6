"""
Failure taxonomy.

Every error the core raises on purpose is a KnownError subclass carrying a
FailureKind, so callers can tell the categories apart without string
matching.

Categories:
- Transport failures (network, file I/O) never surface here. The
  synchronizer turns them into an UpdateStatus instead.
- Decode failures (fetched payloads or persisted bytes) are fatal for the
  operation in progress. No partial records are kept.
- Precondition violations (undo with an empty journal, missing collection)
  are fatal for the call that hit them.
"""

from enum import Enum


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Decode failures
    INVALID_PAYLOAD = "invalid_payload"
    CORRUPT_DATA = "corrupt_data"

    # Resource failures
    NOT_FOUND = "not_found"

    # Precondition violations
    EMPTY_JOURNAL = "empty_journal"


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)


class PayloadDecodeError(KnownError):
    """Raised when a fetched payload does not match the upstream schema."""

    def __init__(self, source: str, detail: str | None = None):
        self.source = source
        super().__init__(
            kind=FailureKind.INVALID_PAYLOAD,
            message=f"Malformed {source} payload.",
            detail=detail,
            suggestion="The upstream schema may have changed.",
        )


class CorruptDataError(KnownError):
    """Raised when persisted bytes cannot be decoded."""

    def __init__(self, what: str, detail: str | None = None):
        self.what = what
        super().__init__(
            kind=FailureKind.CORRUPT_DATA,
            message=f"Failed to decode {what}.",
            detail=detail,
            suggestion="Delete the file or run a catalog update to rebuild it.",
        )


class CollectionNotFoundError(KnownError):
    """Raised when no collection is saved under the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Collection '{name}' does not exist.",
        )


class EmptyJournalError(KnownError):
    """Raised by undo when there is no change left to revert."""

    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.EMPTY_JOURNAL,
            message="There is no change to undo.",
        )
