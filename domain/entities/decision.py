from dataclasses import dataclass
from typing import Optional


@dataclass
class Decision:
    actor_user_id: str
    recipient_user_id: str
    liked_recipient: bool
    last_modified: int
    seen_by_recipient: bool = False

    @staticmethod
    def create(actor_user_id: str, recipient_user_id: str, liked_recipient: bool, last_modified: int) -> 'Decision':
        return Decision(
            actor_user_id=actor_user_id,
            recipient_user_id=recipient_user_id,
            liked_recipient=liked_recipient,
            last_modified=last_modified,
            seen_by_recipient=False)

    def reversed_filter(self) -> 'DecisionFilter':
        """Filter matching a like from the recipient back to the actor."""
        return DecisionFilter(
            actor_user_id=self.recipient_user_id,
            recipient_user_id=self.actor_user_id,
            liked_recipient=True)


@dataclass(frozen=True)
class DecisionFilter:
    """
    Equality predicates over Decision fields.

    A field left as None places no constraint on the query.
    """
    actor_user_id: Optional[str] = None
    recipient_user_id: Optional[str] = None
    liked_recipient: Optional[bool] = None
    last_modified: Optional[int] = None
    seen_by_recipient: Optional[bool] = None

    @staticmethod
    def liked_by_others(recipient_user_id: str, only_unseen: bool = False) -> 'DecisionFilter':
        return DecisionFilter(
            recipient_user_id=recipient_user_id,
            liked_recipient=True,
            seen_by_recipient=False if only_unseen else None)
