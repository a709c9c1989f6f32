"""Helpers for tables whose rows are identified by a unique value."""

from __future__ import annotations

from typing import Any, TypeVar

from sqlalchemy import Select
from sqlalchemy.exc import IntegrityError, MultipleResultsFound
from sqlalchemy.ext.asyncio import AsyncSession

from pantry_store.errors import StoreIntegrityError

T = TypeVar("T")


async def scalar_unique(session: AsyncSession, stmt: Select[tuple[T]], what: str) -> T | None:
    """Execute ``stmt`` and return its single scalar result, or None.

    Raises:
        StoreIntegrityError: If more than one row matches, which means a
            supposedly unique value is stored twice.
    """
    result = await session.execute(stmt)
    try:
        return result.scalar_one_or_none()
    except MultipleResultsFound as exc:
        raise StoreIntegrityError(f"More than one row stored for {what}") from exc


async def insert_or_select(
    session: AsyncSession,
    row: Any,
    lookup: Select[tuple[int]],
    what: str,
) -> int:
    """Insert ``row`` or return the id of the row already holding its unique value.

    The insert runs inside a savepoint. If another writer committed the same
    value first, the unique constraint rejects our insert, the savepoint is
    rolled back and the existing row's id is selected instead. Either way
    exactly one row exists for the value afterwards.

    Args:
        session: Session with an open transaction.
        row: New ORM instance carrying the unique value.
        lookup: Statement selecting the id of the row with that value.
        what: Description of the value, for error messages.

    Returns:
        The id of the inserted or pre-existing row.
    """
    try:
        async with session.begin_nested():
            session.add(row)
    except IntegrityError:
        existing = await scalar_unique(session, lookup, what)
        if existing is None:
            # The violation was not on the unique value we looked up.
            raise
        return existing
    return row.id
