"""Attachment slot API endpoints (nested under /actions/{action_id})."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db
from app.schemas.auth import CurrentUser
from app.schemas.ledger import DeletedResponse
from app.schemas.ledger_attachment import AttachmentCreate, AttachmentFill, AttachmentRead
from app.services import attachment_service

router = APIRouter()


@router.post("", response_model=AttachmentRead, status_code=status.HTTP_201_CREATED)
def create_attachment(
    action_id: UUID,
    data: AttachmentCreate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a slot; omit data (or send null) for an empty slot."""
    attachment = attachment_service.create_attachment(db, action_id, data, user)
    db.commit()
    return attachment


@router.get("", response_model=list[AttachmentRead])
def list_attachments(
    action_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return attachment_service.list_attachments(db, action_id, user.user_id)


# Static paths before /{attachment_id}
@router.get("/empty", response_model=list[AttachmentRead])
def list_empty_slots(
    action_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Slots still waiting for data."""
    return attachment_service.list_empty_slots(db, action_id, user.user_id)


@router.get("/slot/{slot_key}", response_model=AttachmentRead)
def get_attachment_by_slot_key(
    action_id: UUID,
    slot_key: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return attachment_service.get_attachment_by_slot_key(db, action_id, slot_key, user.user_id)


@router.get("/{attachment_id}", response_model=AttachmentRead)
def get_attachment(
    action_id: UUID,
    attachment_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return attachment_service.get_attachment(db, attachment_id, user.user_id, action_id=action_id)


@router.patch("/{attachment_id}", response_model=AttachmentRead)
def fill_attachment(
    action_id: UUID,
    attachment_id: UUID,
    data: AttachmentFill,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Fill or overwrite a slot's data (last write wins)."""
    attachment = attachment_service.fill_attachment(
        db, attachment_id, data.data, user, action_id=action_id
    )
    db.commit()
    return attachment


@router.delete("/{attachment_id}", response_model=DeletedResponse)
def delete_attachment(
    action_id: UUID,
    attachment_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    attachment_service.delete_attachment(db, attachment_id, user, action_id=action_id)
    db.commit()
    return DeletedResponse()
