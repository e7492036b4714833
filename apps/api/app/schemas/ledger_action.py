"""Pydantic schemas for ledger actions."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.db.enums import LedgerActionStatus
from app.schemas.ledger_attachment import AttachmentRead


class ActionCreate(BaseModel):
    """Request to create an action."""
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)


class ActionUpdate(BaseModel):
    """Request to update an action (partial)."""
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    status: LedgerActionStatus | None = None


class ActionRead(BaseModel):
    """Full action response with its attachment slots."""
    id: UUID
    ledger_id: UUID
    title: str
    description: str | None
    status: LedgerActionStatus
    creator_user_id: str
    creator_email: str
    created_at: datetime
    updated_at: datetime

    attachments: list[AttachmentRead] | None = None

    model_config = {"from_attributes": True}


class ActionListItem(BaseModel):
    """Compact action for list views."""
    id: UUID
    ledger_id: UUID
    title: str
    description: str | None
    status: LedgerActionStatus
    creator_user_id: str
    creator_email: str
    attachment_count: int
    created_at: datetime
    updated_at: datetime
