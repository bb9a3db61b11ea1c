# app/schemas/liked_you_schema.py
from typing import List
from pydantic import BaseModel, Field

from domain.entities import LikersPage


class LikerResponse(BaseModel):
    actor_id: str
    unix_timestamp: int


class ListLikedYouResponse(BaseModel):
    likers: List[LikerResponse] = []
    next_pagination_token: str = ""

    @classmethod
    def from_page(cls, page: LikersPage) -> "ListLikedYouResponse":
        return cls(
            likers=[LikerResponse(actor_id=l.actor_id, unix_timestamp=l.unix_timestamp) for l in page.likers],
            next_pagination_token=page.next_pagination_token,
        )


class CountLikedYouResponse(BaseModel):
    count: int = Field(ge=0)


class PutDecisionRequest(BaseModel):
    actor_user_id: str = Field(min_length=1)
    recipient_user_id: str = Field(min_length=1)
    liked_recipient: bool


class PutDecisionResponse(BaseModel):
    mutual_likes: bool
