"""Pydantic schemas for ledger collaborators."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.db.enums import LedgerRole


class CollaboratorAdd(BaseModel):
    """
    Request to share a ledger.

    OWNER is accepted by the schema so the service can reject it with a
    descriptive validation error.
    """
    user_id: str = Field(..., min_length=1, max_length=255)
    role: LedgerRole


class CollaboratorRoleUpdate(BaseModel):
    role: LedgerRole


class CollaboratorRead(BaseModel):
    id: UUID
    ledger_id: UUID
    user_id: str
    role: LedgerRole
    added_by_user_id: str
    added_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
