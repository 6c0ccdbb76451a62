"""
Exception types for the page history engine.
"""


class PageHistoryError(Exception):
    """Base class for all engine errors."""
    pass


class MalformedCommitError(PageHistoryError, ValueError):
    """Raised when a commit violates the input contract (e.g. no timestamp)."""
    pass


class MalformedLineError(PageHistoryError, ValueError):
    """Raised when a line record has no usable id or timestamps."""
    pass


class InvalidOperationError(PageHistoryError):
    """Raised when no undo handler is registered for an operation type."""
    pass


class DecodeError(PageHistoryError):
    """Raised when a wire payload cannot be decoded into engine records."""
    pass


class CommitLogError(PageHistoryError):
    """Raised when commit log operations fail."""
    pass
