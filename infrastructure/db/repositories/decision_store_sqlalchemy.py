from typing import Any
from sqlalchemy import Select, func, select, update
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from domain.entities import Decision, DecisionFilter
from domain.exceptions import DecisionStoreError
from domain.interfaces import DecisionStore
from domain.services.pagination import PAGE_LENGTH, decode_page_token, encode_page_token
from infrastructure.db.models import DecisionModel
from infrastructure.db.models.decisions import decision_from_row, decision_to_values
from infrastructure.logging.structlog_logs import logger
from infrastructure.metrics.metrics import decision_store_failures_total

_UPDATABLE_COLUMNS = ("liked_recipient", "last_modified", "seen_by_recipient")


class DecisionStoreSqlalchemy(DecisionStore):
    """
    SQLAlchemy implementation of DecisionStore.

    Every operation runs in its own session from `session_factory`, so an
    operation scheduled in the background never shares a session with the
    request that scheduled it.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def list_decisions(self, decision_filter: DecisionFilter, pagination_token: str = "") -> tuple[list[Decision], str]:
        """
        List one page of decisions ordered by (actor_user_id, recipient_user_id).

        The token's two keys are applied as separate strict lower bounds on
        each column, not as a composite key comparison. Tokens already handed
        out depend on this.

        Returns:
            The page and the token for the next one. The token is built from
            the last row whenever the page is not empty, even if it is the
            final page; it is "" only for an empty page.

        Raises:
            InvalidPaginationTokenError: if the token cannot be decoded
            DecisionStoreError: if the query fails
        """
        after = decode_page_token(pagination_token)
        stmt = _apply_filter(select(*DecisionModel.__table__.columns), decision_filter)
        if after is not None:
            after_actor, after_recipient = after
            stmt = stmt.where(DecisionModel.actor_user_id > after_actor)
            stmt = stmt.where(DecisionModel.recipient_user_id > after_recipient)
        stmt = stmt.order_by(DecisionModel.actor_user_id, DecisionModel.recipient_user_id).limit(PAGE_LENGTH)

        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                rows = result.all()
        except (SQLAlchemyError, OSError) as e:
            decision_store_failures_total.labels(operation="list").inc()
            raise DecisionStoreError(f"failed to list decisions: {e}", operation="list") from e

        decisions: list[Decision] = []
        for row in rows:
            try:
                decisions.append(decision_from_row(row))
            except (TypeError, ValueError) as e:
                # Skip the row and keep the rest of the page.
                logger.warning("decision_row_decode_failed", error=str(e))
        return decisions, encode_page_token(decisions[-1] if decisions else None)

    async def count_decisions(self, decision_filter: DecisionFilter) -> int:
        """Count every decision matching the filter."""
        stmt = _apply_filter(select(func.count()).select_from(DecisionModel), decision_filter)
        try:
            async with self.session_factory() as session:
                count = (await session.execute(stmt)).scalar_one()
        except (SQLAlchemyError, OSError) as e:
            decision_store_failures_total.labels(operation="count").inc()
            raise DecisionStoreError(f"failed to count decisions: {e}", operation="count") from e
        return int(count)

    async def upsert_decision(self, decision: Decision) -> None:
        """Insert the decision, or replace every column of the existing row for the pair."""
        try:
            async with self.session_factory() as session:
                stmt = _upsert_statement(session.get_bind().dialect.name, decision_to_values(decision))
                await session.execute(stmt)
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            decision_store_failures_total.labels(operation="upsert").inc()
            raise DecisionStoreError(f"failed to upsert decision: {e}", operation="upsert") from e

    async def mark_decisions_as_seen(self, recipient_user_id: str, threshold: int) -> None:
        """
        Flag the recipient's decisions modified strictly before `threshold` as seen.

        A decision stamped exactly at `threshold` may have landed after the
        listing that produced the threshold was read, so it stays unseen.
        Showing a like twice is preferred over never showing it.
        """
        stmt = (
            update(DecisionModel)
            .where(DecisionModel.recipient_user_id == recipient_user_id)
            .where(DecisionModel.last_modified < threshold)
            .values(seen_by_recipient=True)
            .execution_options(synchronize_session=False)
        )
        try:
            async with self.session_factory() as session:
                await session.execute(stmt)
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            decision_store_failures_total.labels(operation="mark_seen").inc()
            raise DecisionStoreError(f"failed to update decisions: {e}", operation="mark_seen") from e


def _apply_filter(stmt: Select, decision_filter: DecisionFilter) -> Select:
    if decision_filter.actor_user_id is not None:
        stmt = stmt.where(DecisionModel.actor_user_id == decision_filter.actor_user_id)
    if decision_filter.recipient_user_id is not None:
        stmt = stmt.where(DecisionModel.recipient_user_id == decision_filter.recipient_user_id)
    if decision_filter.liked_recipient is not None:
        stmt = stmt.where(DecisionModel.liked_recipient == decision_filter.liked_recipient)
    if decision_filter.last_modified is not None:
        stmt = stmt.where(DecisionModel.last_modified == decision_filter.last_modified)
    if decision_filter.seen_by_recipient is not None:
        stmt = stmt.where(DecisionModel.seen_by_recipient == decision_filter.seen_by_recipient)
    return stmt


def _upsert_statement(dialect_name: str, values: dict[str, Any]):
    """Single-statement replace-by-primary-key for the given SQL dialect."""
    table = DecisionModel.__table__
    if dialect_name == "mysql":
        stmt = mysql.insert(table).values(**values)
        return stmt.on_duplicate_key_update(**{col: stmt.inserted[col] for col in _UPDATABLE_COLUMNS})
    if dialect_name == "postgresql":
        stmt = postgresql.insert(table).values(**values)
    elif dialect_name == "sqlite":
        stmt = sqlite.insert(table).values(**values)
    else:
        raise DecisionStoreError(f"failed to upsert decision: unsupported dialect {dialect_name!r}", operation="upsert")
    return stmt.on_conflict_do_update(
        index_elements=[table.c.actor_user_id, table.c.recipient_user_id],
        set_={col: stmt.excluded[col] for col in _UPDATABLE_COLUMNS},
    )
