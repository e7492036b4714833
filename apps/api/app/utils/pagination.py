"""Keyset (cursor) pagination utilities for newest-first feeds."""

from dataclasses import dataclass
from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select


T = TypeVar("T")


class InvalidCursorError(ValueError):
    """Cursor id does not reference a row of the paginated model."""


@dataclass
class CursorPage(Generic[T]):
    """One page of rows plus the cursor for the next one."""
    items: list[T]
    has_more: bool
    next_cursor: UUID | None


def paginate_desc(
    db: Session,
    stmt: Select,
    model,
    limit: int,
    cursor: UUID | None = None,
) -> CursorPage:
    """
    Run stmt ordered by (created_at DESC, id DESC), resuming after cursor.

    The cursor is the id of the last row of the previous page; that row is
    excluded. has_more is True iff exactly `limit` rows came back, so a
    final full page is followed by one empty page.

    Raises:
        InvalidCursorError: cursor doesn't match a row of `model`
    """
    if cursor is not None:
        anchor = db.get(model, cursor)
        if anchor is None:
            raise InvalidCursorError(f"Unknown cursor {cursor}")
        stmt = stmt.where(
            or_(
                model.created_at < anchor.created_at,
                and_(model.created_at == anchor.created_at, model.id < anchor.id),
            )
        )

    rows = list(
        db.scalars(stmt.order_by(model.created_at.desc(), model.id.desc()).limit(limit))
    )
    has_more = len(rows) == limit
    return CursorPage(
        items=rows,
        has_more=has_more,
        next_cursor=rows[-1].id if has_more and rows else None,
    )
