"""Pydantic schemas for action attachments (slots)."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from app.db.enums import LedgerAttachmentType


class AttachmentCreate(BaseModel):
    """
    Request to create an attachment.

    data may be omitted or null to create an empty slot.
    slot_key is generated from the type when omitted.
    """
    type: LedgerAttachmentType
    slot_key: str | None = Field(None, min_length=1, max_length=100)
    data: Any = None


class AttachmentFill(BaseModel):
    """
    Request to fill (or overwrite) the data of a slot.

    data is required: a fill never empties a slot.
    """
    data: dict[str, Any]


class AttachmentRead(BaseModel):
    id: UUID
    action_id: UUID
    type: LedgerAttachmentType
    slot_key: str
    data: dict[str, Any] | None
    creator_user_id: str
    creator_email: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
