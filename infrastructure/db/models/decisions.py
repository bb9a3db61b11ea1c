from typing import Any
from sqlalchemy import Column, String, Boolean, BigInteger, Index
from sqlalchemy.orm import Mapped
from domain.entities.decision import Decision
from infrastructure.db.models.base import Base


class DecisionModel(Base):
    __tablename__ = "decisions"
    actor_user_id: Mapped[str] = Column(String(255), primary_key=True)
    recipient_user_id: Mapped[str] = Column(String(255), primary_key=True)
    liked_recipient: Mapped[bool] = Column(Boolean, nullable=False, default=False)
    last_modified: Mapped[int] = Column(BigInteger, nullable=False)  # unix seconds
    seen_by_recipient: Mapped[bool] = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("ix_decisions_recipient_liked", "recipient_user_id", "liked_recipient", "seen_by_recipient"),
    )


def decision_to_values(decision: Decision) -> dict[str, Any]:
    """Full row image for an insert or replace."""
    return {
        "actor_user_id": decision.actor_user_id,
        "recipient_user_id": decision.recipient_user_id,
        "liked_recipient": decision.liked_recipient,
        "last_modified": decision.last_modified,
        "seen_by_recipient": decision.seen_by_recipient,
    }


def decision_from_row(row: Any) -> Decision:
    """
    Decode a selected row (or model instance) into a domain Decision.

    Raises:
        ValueError: if a user id is missing or empty
        TypeError: if a column holds NULL or a value of the wrong kind
    """
    if not row.actor_user_id or not row.recipient_user_id:
        raise ValueError(
            f"decision row has an empty user id: actor={row.actor_user_id!r} recipient={row.recipient_user_id!r}"
        )
    if row.liked_recipient is None or row.seen_by_recipient is None:
        raise TypeError("decision row has a NULL flag")
    return Decision(
        actor_user_id=str(row.actor_user_id),
        recipient_user_id=str(row.recipient_user_id),
        liked_recipient=bool(row.liked_recipient),
        last_modified=int(row.last_modified),
        seen_by_recipient=bool(row.seen_by_recipient),
    )
