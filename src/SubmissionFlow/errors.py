"""Exception hierarchy for triplestore access and configuration failures.

Only hard failures are modelled as exceptions. A conditional update whose
``WHERE`` pattern matches nothing, or a lookup that cannot follow a link, is
an expected outcome: updates silently do nothing and lookups return ``None``
or an empty list. Callers needing confirmation issue a follow-up read.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "SubmissionFlowError",
    "ConfigurationError",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
]

_QUERY_PREVIEW_CHARS = 500


class SubmissionFlowError(RuntimeError):
    """Base exception for every failure raised by this package."""


class ConfigurationError(SubmissionFlowError):
    """Raised when settings are missing or inconsistent."""


class StoreError(SubmissionFlowError):
    """Raised when a call to the triplestore itself fails.

    Attributes:
        status_code: HTTP status returned by the store, when one was received.
        query: Leading part of the SPARQL text that was rejected, for logs.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        query: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.query = query[:_QUERY_PREVIEW_CHARS] if query else None


class StoreReadError(StoreError):
    """Raised when a SELECT or CONSTRUCT query fails."""


class StoreWriteError(StoreError):
    """Raised when a SPARQL update fails."""
