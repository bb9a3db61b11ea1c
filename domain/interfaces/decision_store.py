from typing_extensions import Protocol
from domain.entities import Decision, DecisionFilter


class DecisionStore(Protocol):
    async def list_decisions(self, decision_filter: DecisionFilter, pagination_token: str = "") -> tuple[list[Decision], str]: ...
    async def count_decisions(self, decision_filter: DecisionFilter) -> int: ...
    async def upsert_decision(self, decision: Decision) -> None: ...
    async def mark_decisions_as_seen(self, recipient_user_id: str, threshold: int) -> None: ...
