"""Resolving path references to rows.

User-facing entities are addressable by either their integer id or their
public uuid. Both forms arrive as strings from the URL.
"""

import re
from typing import Optional, Sequence, Type, TypeVar, Union

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from vibe_awards.core.exceptions import NotFoundError

ModelT = TypeVar("ModelT")

Ref = Union[int, str]

# ASCII digits only, short enough for a signed 64-bit column
_NUMERIC_ID = re.compile(r"[0-9]{1,18}")


def numeric_id(ref: Ref) -> Optional[int]:
    """The integer id ref names, or None if it can only be a uuid."""
    ref = str(ref).strip()
    if _NUMERIC_ID.fullmatch(ref):
        return int(ref)
    return None


def ref_clause(model, ref: Ref):
    """WHERE clause matching model rows by numeric id or uuid."""
    ref = str(ref).strip()
    ref_id = numeric_id(ref)
    if ref_id is not None:
        return or_(model.id == ref_id, model.uuid == ref)
    return model.uuid == ref


async def find_by_ref(
    db: AsyncSession,
    model: Type[ModelT],
    ref: Ref,
    options: Sequence = (),
) -> Optional[ModelT]:
    stmt = select(model).where(ref_clause(model, ref)).limit(1)
    if options:
        stmt = stmt.options(*options)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_by_ref(
    db: AsyncSession,
    model: Type[ModelT],
    ref: Ref,
    label: str,
    options: Sequence = (),
) -> ModelT:
    """Like find_by_ref, but raise NotFoundError(label) when absent."""
    row = await find_by_ref(db, model, ref, options)
    if row is None:
        raise NotFoundError(label, ref)
    return row


def matches_ref(row, ref: Ref) -> bool:
    """True if ref names row by id or uuid."""
    ref = str(ref).strip()
    ref_id = numeric_id(ref)
    return (ref_id is not None and row.id == ref_id) or row.uuid == ref
