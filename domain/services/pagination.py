"""
Pagination tokens for listing decisions.

A token is the primary key of the last decision on a page, actor and
recipient joined by PAGE_TOKEN_SEPARATOR. Callers treat it as opaque.
"""
from typing import Optional, Tuple

from domain.entities import Decision
from domain.exceptions import InvalidPaginationTokenError

PAGE_LENGTH = 10
PAGE_TOKEN_SEPARATOR = "##"


def encode_page_token(last_decision: Optional[Decision]) -> str:
    """Build the token for the page after `last_decision`, or "" if there is none."""
    if last_decision is None:
        return ""
    return f"{last_decision.actor_user_id}{PAGE_TOKEN_SEPARATOR}{last_decision.recipient_user_id}"


def decode_page_token(token: str) -> Optional[Tuple[str, str]]:
    """
    Split a token into (actor_user_id, recipient_user_id).

    Returns None for the empty token (first page). Components beyond the
    second are ignored.

    Raises:
        InvalidPaginationTokenError: if the token has no separator
    """
    if not token:
        return None
    parts = token.split(PAGE_TOKEN_SEPARATOR)
    if len(parts) < 2:
        raise InvalidPaginationTokenError(f"invalid pagination token: {token!r}")
    return parts[0], parts[1]
