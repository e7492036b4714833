"""Utility modules."""

from app.utils.pagination import (
    CursorPage,
    InvalidCursorError,
    paginate_desc,
)

__all__ = [
    # Pagination
    "CursorPage",
    "InvalidCursorError",
    "paginate_desc",
]
