"""
Domain exceptions for the explore service.

The router maps each of these to an HTTP status; everything else is a 500.
"""
from typing import Optional

from domain.entities import PutDecisionResult


class ExploreError(Exception):
    """Base class for explore service errors."""


class DecisionStoreError(ExploreError):
    """Raised when a query or statement against the decisions table fails."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


class InvalidPaginationTokenError(ExploreError, ValueError):
    """Raised when a pagination token cannot be split into its two keys."""


class MutualLikesCheckError(ExploreError):
    """
    Raised when the reverse-like lookup fails after the decision was stored.

    The decision itself is already persisted; `result` is the response the
    caller should still see, with mutual_likes set to False.
    """

    def __init__(self, message: str, result: Optional[PutDecisionResult] = None):
        super().__init__(message)
        self.result = result or PutDecisionResult(mutual_likes=False)
