"""Pydantic schemas for ledger templates and action definitions."""

from uuid import UUID

from pydantic import BaseModel, Field

from app.db.enums import LedgerAttachmentType


class AttachmentSlotPreview(BaseModel):
    type: LedgerAttachmentType
    slot_key: str
    required: bool
    description: str | None = None


class ActionPreview(BaseModel):
    """What an action type would scaffold (nothing is persisted)."""
    type: str
    title: str
    description: str | None = None
    expected_attachments: list[AttachmentSlotPreview]


class TemplateInfo(BaseModel):
    id: str
    name: str
    description: str
    category: str
    action_types: list[str]


class TemplateRead(BaseModel):
    template: TemplateInfo
    actions: list[ActionPreview]


class ApplyTemplateRequest(BaseModel):
    template_id: str = Field(..., min_length=1)


class ApplyActionsRequest(BaseModel):
    action_types: list[str] = Field(..., min_length=1)


class AppliedAction(BaseModel):
    id: UUID
    title: str
    type: str
    attachment_slots_created: int


class AppliedTemplateResult(BaseModel):
    ledger_id: UUID
    actions_created: int
    actions: list[AppliedAction]
