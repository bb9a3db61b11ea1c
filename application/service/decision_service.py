import asyncio
import time
from typing import Callable, Optional
from domain.entities import Decision, DecisionFilter, Liker, LikersPage, PutDecisionResult
from domain.exceptions import InvalidPaginationTokenError, MutualLikesCheckError
from domain.interfaces import DecisionStore, MetricsPort, LoggingPort, BoundLogger

DEFAULT_MARK_SEEN_TIMEOUT_SECONDS = 5.0


class _NoOpLogger:
    """Used when no logging_port is given, e.g. in unit tests."""
    def debug(self, event: str, **kwargs): pass
    def info(self, event: str, **kwargs): pass
    def warning(self, event: str, exc_info: bool = False, **kwargs): pass
    def error(self, event: str, exc_info: bool = False, **kwargs): pass


class DecisionService:
    def __init__(
        self,
        decision_store: DecisionStore,
        metrics_port: Optional[MetricsPort] = None,
        logging_port: Optional[LoggingPort] = None,
        mark_seen_timeout_seconds: float = DEFAULT_MARK_SEEN_TIMEOUT_SECONDS,
        now_fn: Callable[[], float] = time.time,
    ):
        """
        Initialize the decision service.

        Args:
            decision_store: Store holding the decisions table (required)
            metrics_port: Metrics port for emitting metrics (optional)
            logging_port: Logging port for structured logging (optional)
            mark_seen_timeout_seconds: Bound for each background mark-as-seen job
            now_fn: Clock returning unix seconds; replaced in tests
        """
        self.decision_store = decision_store
        self.metrics_port = metrics_port
        self.logging_port = logging_port
        self.mark_seen_timeout_seconds = mark_seen_timeout_seconds
        self.now_fn = now_fn
        # Strong references so pending jobs are not garbage collected mid-flight
        self._background_tasks: set[asyncio.Task] = set()

    def _log(self, **context) -> BoundLogger:
        if self.logging_port:
            return self.logging_port.bind(**context)
        return _NoOpLogger()

    def _now(self) -> int:
        return int(self.now_fn())

    async def list_liked_you(self, recipient_user_id: str, pagination_token: str = "") -> LikersPage:
        """List users who liked `recipient_user_id`, seen or not."""
        return await self._list_likers(
            DecisionFilter.liked_by_others(recipient_user_id),
            recipient_user_id,
            pagination_token,
            step="list_liked_you",
        )

    async def list_new_liked_you(self, recipient_user_id: str, pagination_token: str = "") -> LikersPage:
        """List users who liked `recipient_user_id` and have not been shown yet."""
        return await self._list_likers(
            DecisionFilter.liked_by_others(recipient_user_id, only_unseen=True),
            recipient_user_id,
            pagination_token,
            step="list_new_liked_you",
        )

    async def _list_likers(self, decision_filter: DecisionFilter, recipient_user_id: str, pagination_token: str, step: str) -> LikersPage:
        # Taken before the read: anything stamped at or after it stays unseen.
        now = self._now()
        log = self._log(recipient_user_id=recipient_user_id, step=step)

        try:
            decisions, next_token = await self.decision_store.list_decisions(decision_filter, pagination_token)
        except InvalidPaginationTokenError as e:
            log.warning("invalid_pagination_token", error=str(e))
            raise
        except Exception as e:
            log.error("list_decisions_failed", error=str(e), exc_info=True)
            raise

        self._mark_seen_in_background(recipient_user_id, now)

        likers = [Liker.from_decision(d) for d in decisions]
        if self.metrics_port:
            self.metrics_port.observe_likers_page_size(len(likers))
        log.info("likers_listed", count=len(likers), has_next_token=bool(next_token))
        return LikersPage(likers=likers, next_pagination_token=next_token)

    async def count_liked_you(self, recipient_user_id: str) -> int:
        log = self._log(recipient_user_id=recipient_user_id, step="count_liked_you")
        try:
            return await self.decision_store.count_decisions(DecisionFilter.liked_by_others(recipient_user_id))
        except Exception as e:
            log.error("count_decisions_failed", error=str(e), exc_info=True)
            raise

    async def put_decision(self, actor_user_id: str, recipient_user_id: str, liked_recipient: bool) -> PutDecisionResult:
        """
        Record a like or pass and report whether it completes a mutual like.

        The upsert and the mutual check are independent: if the reverse lookup
        fails the decision stays stored and MutualLikesCheckError carries a
        result with mutual_likes=False.

        Raises:
            DecisionStoreError: if the decision could not be stored
            MutualLikesCheckError: if the reverse lookup failed
        """
        log = self._log(actor_user_id=actor_user_id, recipient_user_id=recipient_user_id, step="put_decision")
        decision = Decision.create(
            actor_user_id=actor_user_id,
            recipient_user_id=recipient_user_id,
            liked_recipient=liked_recipient,
            last_modified=self._now(),
        )

        try:
            await self.decision_store.upsert_decision(decision)
        except Exception as e:
            log.error("upsert_decision_failed", error=str(e), exc_info=True)
            raise
        if self.metrics_port:
            self.metrics_port.increment_decision_total(outcome="like" if liked_recipient else "pass")

        result = PutDecisionResult(mutual_likes=False)
        if not liked_recipient:
            log.info("decision_recorded", liked_recipient=False)
            return result

        try:
            reverse, _ = await self.decision_store.list_decisions(decision.reversed_filter(), "")
        except Exception as e:
            log.error("mutual_likes_check_failed", error=str(e), exc_info=True)
            raise MutualLikesCheckError(f"failed to check if it's mutual: {e}", result=result) from e

        result.mutual_likes = len(reverse) > 0
        if result.mutual_likes and self.metrics_port:
            self.metrics_port.increment_mutual_likes()
        log.info("decision_recorded", liked_recipient=True, mutual_likes=result.mutual_likes)
        return result

    def _mark_seen_in_background(self, recipient_user_id: str, threshold: int) -> None:
        # create_task detaches the job from the request task, so cancelling
        # the request does not cancel it.
        task = asyncio.create_task(self._mark_seen(recipient_user_id, threshold))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _mark_seen(self, recipient_user_id: str, threshold: int) -> None:
        log = self._log(recipient_user_id=recipient_user_id, step="mark_decisions_as_seen", threshold=threshold)
        start_time = time.time()
        try:
            await asyncio.wait_for(
                self.decision_store.mark_decisions_as_seen(recipient_user_id, threshold),
                timeout=self.mark_seen_timeout_seconds,
            )
        except asyncio.TimeoutError:
            log.warning("mark_decisions_as_seen_timed_out", timeout_seconds=self.mark_seen_timeout_seconds)
            if self.metrics_port:
                self.metrics_port.increment_mark_seen_failures()
            return
        except Exception as e:
            log.warning("mark_decisions_as_seen_failed", error=str(e), exc_info=True)
            if self.metrics_port:
                self.metrics_port.increment_mark_seen_failures()
            return
        log.debug("decisions_marked_as_seen", duration_ms=round((time.time() - start_time) * 1000, 2))

    @property
    def pending_background_tasks(self) -> int:
        return len(self._background_tasks)

    async def drain(self, timeout: Optional[float] = None) -> None:
        """
        Wait for pending mark-as-seen jobs.

        Jobs still running after `timeout` seconds are left alone; each one is
        already bounded by its own timeout.
        """
        if not self._background_tasks:
            return
        await asyncio.wait(list(self._background_tasks), timeout=timeout)
