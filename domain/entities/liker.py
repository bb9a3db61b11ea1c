from dataclasses import dataclass, field

from .decision import Decision


@dataclass
class Liker:
    actor_id: str
    unix_timestamp: int

    @staticmethod
    def from_decision(decision: Decision) -> 'Liker':
        return Liker(actor_id=decision.actor_user_id, unix_timestamp=decision.last_modified)


@dataclass
class LikersPage:
    likers: list[Liker] = field(default_factory=list)
    next_pagination_token: str = ""


@dataclass
class PutDecisionResult:
    mutual_likes: bool = False
