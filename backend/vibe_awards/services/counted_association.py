"""Association rows paired with denormalized counters on their target.

Likes, nominations, battle votes and collaboration interests all follow
one pattern: a row that may exist at most once per (target, owner), and
one or more counter columns on the target that must equal the number of
such rows. CountedAssociation implements that pattern once.

Both mutations run inside a savepoint: the row change and the counter
UPDATE commit or roll back together. Counters are adjusted with a single
``SET col = col + n`` statement, never read-modify-write in Python, so
concurrent operations on different pairs never lose increments. The
store's unique constraint is the final arbiter of duplicates; a unique
violation on insert is reported as the configured "already acted" error.
"""

from typing import Any, Callable, Generic, Mapping, Optional, Type, TypeVar

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vibe_awards.core.exceptions import AlreadyActedError, NotFoundError, StoreError
from vibe_awards.models.base import Base

logger = structlog.get_logger(__name__)

RowT = TypeVar("RowT", bound=Base)

UNIQUE_VIOLATION_SQLSTATE = "23505"
FOREIGN_KEY_VIOLATION_SQLSTATE = "23503"


def _sqlstate(exc: IntegrityError) -> Optional[str]:
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the integrity error came from a UNIQUE constraint or key."""
    if _sqlstate(exc) == UNIQUE_VIOLATION_SQLSTATE:
        return True
    return "unique" in str(exc.orig).lower()


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    if _sqlstate(exc) == FOREIGN_KEY_VIOLATION_SQLSTATE:
        return True
    return "foreign key" in str(exc.orig).lower()


class CountedAssociation(Generic[RowT]):
    """One-per-owner association rows with counters kept on the target.

    Args:
        db: Session the operations run in
        model: Association model (e.g. Like)
        target_model: Model holding the counters (e.g. Submission)
        target_column: Association column referencing the target's id
        owner_column: Association column that, with target_column, is unique
        target_label: Resource name used in not-found errors
        duplicate_error: Factory for the error raised on a duplicate insert
    """

    def __init__(
        self,
        db: AsyncSession,
        *,
        model: Type[RowT],
        target_model: Type[Base],
        target_column: str,
        owner_column: str,
        target_label: str,
        duplicate_error: Callable[[], AlreadyActedError] = AlreadyActedError,
    ):
        self.db = db
        self.model = model
        self.target_model = target_model
        self.target_column = target_column
        self.owner_column = owner_column
        self.target_label = target_label
        self.duplicate_error = duplicate_error
        self.logger = logger.bind(association=model.__tablename__)

    def _match(self, target_id: int, owner: Any):
        return (
            getattr(self.model, self.target_column) == target_id,
            getattr(self.model, self.owner_column) == owner,
        )

    async def find(self, target_id: int, owner: Any) -> Optional[RowT]:
        """Return the association row for (target, owner), if any."""
        stmt = select(self.model).where(*self._match(target_id, owner))
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def exists(self, target_id: int, owner: Any) -> bool:
        stmt = select(self.model.id).where(*self._match(target_id, owner)).limit(1)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def count(self, target_id: int) -> int:
        """Count association rows for a target straight from the table."""
        stmt = select(func.count(self.model.id)).where(
            getattr(self.model, self.target_column) == target_id
        )
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def _adjust_counters(self, target: Base, counters: Mapping[str, int], sign: int) -> None:
        values = {
            name: getattr(self.target_model, name) + sign * step
            for name, step in counters.items()
        }
        stmt = (
            update(self.target_model)
            .where(self.target_model.id == target.id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        if result.rowcount != 1:
            raise NotFoundError(self.target_label, target.id)

    async def add(self, target: Base, owner: Any, counters: Mapping[str, int], **fields: Any) -> RowT:
        """Insert the association row and bump the counters atomically.

        Raises:
            AlreadyActedError: (or the configured subclass) the row already exists
            NotFoundError: the target disappeared underneath us
            StoreError: any other integrity failure
        """
        row = self.model(
            **{self.target_column: target.id, self.owner_column: owner},
            **fields,
        )
        try:
            async with self.db.begin_nested():
                self.db.add(row)
                await self.db.flush()
                await self._adjust_counters(target, counters, +1)
        except IntegrityError as exc:
            if is_unique_violation(exc):
                self.logger.info("duplicate_association_rejected", target_id=target.id, owner=str(owner))
                raise self.duplicate_error() from exc
            if is_foreign_key_violation(exc):
                raise NotFoundError(self.target_label, target.id) from exc
            raise StoreError(exc) from exc

        await self.db.refresh(target, attribute_names=list(counters))
        return row

    async def remove(self, target: Base, owner: Any, counters: Mapping[str, int]) -> bool:
        """Delete the association row and decrement the counters atomically.

        The counters only move if a row was actually deleted, so a
        concurrent remover cannot drive them below the row count.

        Returns:
            True if a row was deleted
        """
        try:
            async with self.db.begin_nested():
                stmt = delete(self.model).where(*self._match(target.id, owner))
                result = await self.db.execute(stmt)
                removed = result.rowcount > 0
                if removed:
                    await self._adjust_counters(target, counters, -1)
        except IntegrityError as exc:
            raise StoreError(exc) from exc

        await self.db.refresh(target, attribute_names=list(counters))
        return removed
