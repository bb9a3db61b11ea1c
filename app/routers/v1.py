from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from app.schemas.liked_you_schema import (
    CountLikedYouResponse,
    ListLikedYouResponse,
    PutDecisionRequest,
    PutDecisionResponse,
)
from application.service.decision_service import DecisionService
from domain.exceptions import DecisionStoreError, InvalidPaginationTokenError, MutualLikesCheckError


def get_decision_service(request: Request) -> DecisionService:
    """
    Dependency returning the process-wide DecisionService built at startup.

    One instance is shared so shutdown can drain its background jobs.
    """
    return request.app.state.decision_service


def _store_unavailable(e: DecisionStoreError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail={"error": "decision_store_error", "message": str(e)}
    )


def _bad_token(e: InvalidPaginationTokenError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": "invalid_pagination_token", "message": str(e)}
    )


router = APIRouter(prefix="/v1")

@router.get("/liked-you")
async def list_liked_you(
    recipient_user_id: str = Query(..., min_length=1),
    pagination_token: str = "",
    srv: DecisionService = Depends(get_decision_service),
) -> ListLikedYouResponse:
    """
    List the users who liked `recipient_user_id`, 10 per page.

    Pass `next_pagination_token` from the previous response to get the next page.
    Once the page is read, every decision for `recipient_user_id` stamped
    before the request started is marked as seen in the background. That
    includes decisions on later pages and passes.
    """
    try:
        page = await srv.list_liked_you(recipient_user_id, pagination_token)
    except InvalidPaginationTokenError as e:
        raise _bad_token(e)
    except DecisionStoreError as e:
        raise _store_unavailable(e)
    return ListLikedYouResponse.from_page(page)

@router.get("/liked-you/new")
async def list_new_liked_you(
    recipient_user_id: str = Query(..., min_length=1),
    pagination_token: str = "",
    srv: DecisionService = Depends(get_decision_service),
) -> ListLikedYouResponse:
    """
    List the users who liked `recipient_user_id` and were not shown before.
    """
    try:
        page = await srv.list_new_liked_you(recipient_user_id, pagination_token)
    except InvalidPaginationTokenError as e:
        raise _bad_token(e)
    except DecisionStoreError as e:
        raise _store_unavailable(e)
    return ListLikedYouResponse.from_page(page)

@router.get("/liked-you/count")
async def count_liked_you(
    recipient_user_id: str = Query(..., min_length=1),
    srv: DecisionService = Depends(get_decision_service),
) -> CountLikedYouResponse:
    try:
        count = await srv.count_liked_you(recipient_user_id)
    except DecisionStoreError as e:
        raise _store_unavailable(e)
    return CountLikedYouResponse(count=count)

@router.put("/decision")
async def put_decision(
    payload: PutDecisionRequest,
    srv: DecisionService = Depends(get_decision_service),
) -> PutDecisionResponse:
    """
    Record a like or pass from `actor_user_id` about `recipient_user_id`.

    A later decision for the same pair replaces the earlier one.
    `mutual_likes` is true when the recipient already likes the actor back.

    **Partial failure**: if the decision is stored but the mutual check fails,
    the response is 503 with `decision_recorded: true` and `mutual_likes: false`.
    """
    try:
        result = await srv.put_decision(
            actor_user_id=payload.actor_user_id,
            recipient_user_id=payload.recipient_user_id,
            liked_recipient=payload.liked_recipient,
        )
    except MutualLikesCheckError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "error": "mutual_likes_check_failed",
                "message": str(e),
                "decision_recorded": True,
                "mutual_likes": e.result.mutual_likes,
            }
        )
    except DecisionStoreError as e:
        raise _store_unavailable(e)
    return PutDecisionResponse(mutual_likes=result.mutual_likes)
