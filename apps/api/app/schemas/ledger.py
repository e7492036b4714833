"""Pydantic schemas for ledgers."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.db.enums import LedgerRole
from app.schemas.ledger_action import ActionListItem
from app.schemas.ledger_collaborator import CollaboratorRead
from app.schemas.ledger_status_update import StatusUpdateRead


class LedgerCreate(BaseModel):
    """Request to create a ledger."""
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    linked_entity_type: str | None = Field(
        None, max_length=50, description="'memorial', 'fundraiser', 'event', ..."
    )
    linked_entity_id: str | None = Field(None, max_length=255)


class LedgerUpdate(BaseModel):
    """Request to update a ledger (partial, owner only)."""
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    linked_entity_type: str | None = Field(None, max_length=50)
    linked_entity_id: str | None = Field(None, max_length=255)


class LedgerRead(BaseModel):
    """Ledger response; nested collections only with ?include=all."""
    id: UUID
    owner_user_id: str
    title: str
    description: str | None
    linked_entity_type: str | None
    linked_entity_id: str | None
    created_at: datetime
    updated_at: datetime

    actions: list[ActionListItem] | None = None
    collaborators: list[CollaboratorRead] | None = None
    status_updates: list[StatusUpdateRead] | None = None


class LedgerListItem(BaseModel):
    """Compact ledger for list views."""
    id: UUID
    owner_user_id: str
    title: str
    description: str | None
    linked_entity_type: str | None
    linked_entity_id: str | None
    action_count: int
    collaborator_count: int
    created_at: datetime
    updated_at: datetime


class LedgerRoleResponse(BaseModel):
    role: LedgerRole | None


class DeletedResponse(BaseModel):
    deleted: bool = True
