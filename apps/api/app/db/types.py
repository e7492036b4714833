"""Portable column types shared by the ledger models."""

from __future__ import annotations

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB


# JSONB on PostgreSQL, generic JSON elsewhere (SQLite in tests).
# none_as_null: Python None is stored as SQL NULL, not the JSON literal 'null',
# so "empty slot" rows can be filtered with IS NULL.
JSONDocument = JSON(none_as_null=True).with_variant(
    JSONB(none_as_null=True), "postgresql"
)
