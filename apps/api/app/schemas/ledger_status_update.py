"""Pydantic schemas for the ledger audit trail."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field

from app.db.enums import LedgerStatusUpdateType


class NoteCreate(BaseModel):
    """User-authored note, optionally scoped to one action."""
    message: str = Field(..., min_length=1, max_length=2000)
    action_id: UUID | None = None


class StatusUpdateRead(BaseModel):
    id: UUID
    ledger_id: UUID
    action_id: UUID | None
    type: LedgerStatusUpdateType
    actor_user_id: str | None
    actor_email: str | None
    message: str | None
    # ORM attribute is metadata_ (Declarative reserves "metadata")
    metadata: dict[str, Any] | None = Field(
        None, validation_alias=AliasChoices("metadata_", "metadata")
    )
    created_at: datetime

    model_config = {"from_attributes": True}


class StatusUpdatePage(BaseModel):
    """Cursor-paginated status updates (newest first)."""
    items: list[StatusUpdateRead]
    has_more: bool
    next_cursor: UUID | None
