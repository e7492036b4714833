"""Attachment service - typed slots on ledger actions."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.structured_logging import build_log_context
from app.db.enums import LedgerAttachmentType, LedgerRole
from app.db.models import LedgerAttachment
from app.schemas.auth import CurrentUser
from app.schemas.ledger_attachment import AttachmentCreate
from app.services import ledger_activity_service
from app.services.action_service import load_action
from app.services.attachment_validator import generate_slot_key, validate_attachment_data
from app.services.ledger_service import (
    LedgerConflictError,
    LedgerNotFoundError,
    LedgerValidationError,
    verify_access,
)

logger = logging.getLogger(__name__)


def _slot_taken(db: Session, action_id: UUID, slot_key: str) -> bool:
    return (
        db.scalar(
            select(LedgerAttachment.id).where(
                LedgerAttachment.action_id == action_id,
                LedgerAttachment.slot_key == slot_key,
            )
        )
        is not None
    )


def _load_attachment(
    db: Session, attachment_id: UUID, action_id: UUID | None = None
) -> LedgerAttachment:
    attachment = db.get(LedgerAttachment, attachment_id)
    if not attachment or (action_id is not None and attachment.action_id != action_id):
        raise LedgerNotFoundError(f"Attachment {attachment_id} not found")
    return attachment


def create_attachment(
    db: Session, action_id: UUID, data: AttachmentCreate, user: CurrentUser
) -> LedgerAttachment:
    """
    Create an attachment slot on an action (EDITOR+).

    data may be None for an empty slot; only a non-empty payload is audited.

    Raises:
        LedgerValidationError: Payload doesn't match the type
        LedgerConflictError: (action, slot_key) already exists
    """
    action = load_action(db, action_id)
    verify_access(db, action.ledger_id, user.user_id, LedgerRole.EDITOR)

    validate_attachment_data(data.type, data.data)
    slot_key = data.slot_key or generate_slot_key(data.type)

    if _slot_taken(db, action_id, slot_key):
        raise LedgerConflictError(
            f'Attachment slot "{slot_key}" already exists on this action'
        )

    attachment = LedgerAttachment(
        action_id=action_id,
        type=data.type.value,
        slot_key=slot_key,
        data=data.data,
        creator_user_id=user.user_id,
        creator_email=user.email,
    )
    db.add(attachment)
    try:
        db.flush()
    except IntegrityError:
        # Lost a race with a concurrent create of the same slot
        db.rollback()
        raise LedgerConflictError(
            f'Attachment slot "{slot_key}" already exists on this action'
        )

    if data.data is not None:
        ledger_activity_service.log_attachment_filled(
            db, action.ledger_id, action_id, data.type, slot_key, user
        )

    logger.info(
        "Ledger attachment created type=%s slot=%s",
        data.type.value,
        slot_key,
        extra=build_log_context(
            user_id=user.user_id, ledger_id=action.ledger_id, action_id=action_id
        ),
    )
    return attachment


def fill_attachment(
    db: Session,
    attachment_id: UUID,
    data: Any,
    user: CurrentUser,
    action_id: UUID | None = None,
) -> LedgerAttachment:
    """
    Fill or overwrite a slot's payload (EDITOR+). Last write wins.

    The payload is validated against the type fixed at creation. The audit
    event records whether the slot was empty before this write.

    Raises:
        LedgerValidationError: data is None or doesn't match the slot's type
    """
    attachment = _load_attachment(db, attachment_id, action_id)
    action = load_action(db, attachment.action_id)
    verify_access(db, action.ledger_id, user.user_id, LedgerRole.EDITOR)

    if data is None:
        raise LedgerValidationError("Attachment data is required to fill a slot")

    attachment_type = LedgerAttachmentType(attachment.type)
    validate_attachment_data(attachment_type, data)

    was_empty = attachment.data is None
    attachment.data = data
    db.flush()

    ledger_activity_service.log_attachment_filled(
        db,
        action.ledger_id,
        action.id,
        attachment_type,
        attachment.slot_key,
        user,
        was_empty=was_empty,
    )

    logger.info(
        "Ledger attachment filled slot=%s was_empty=%s",
        attachment.slot_key,
        was_empty,
        extra=build_log_context(
            user_id=user.user_id, ledger_id=action.ledger_id, action_id=action.id
        ),
    )
    return attachment


def get_attachment(
    db: Session, attachment_id: UUID, user_id: str, action_id: UUID | None = None
) -> LedgerAttachment:
    attachment = _load_attachment(db, attachment_id, action_id)
    action = load_action(db, attachment.action_id)
    verify_access(db, action.ledger_id, user_id, LedgerRole.VIEWER)
    return attachment


def list_attachments(db: Session, action_id: UUID, user_id: str) -> list[LedgerAttachment]:
    """All slots of an action, oldest first."""
    action = load_action(db, action_id)
    verify_access(db, action.ledger_id, user_id, LedgerRole.VIEWER)
    return list(
        db.scalars(
            select(LedgerAttachment)
            .where(LedgerAttachment.action_id == action_id)
            .order_by(LedgerAttachment.created_at.asc(), LedgerAttachment.id.asc())
        )
    )


def get_attachment_by_slot_key(
    db: Session, action_id: UUID, slot_key: str, user_id: str
) -> LedgerAttachment:
    action = load_action(db, action_id)
    verify_access(db, action.ledger_id, user_id, LedgerRole.VIEWER)
    attachment = db.scalar(
        select(LedgerAttachment).where(
            LedgerAttachment.action_id == action_id,
            LedgerAttachment.slot_key == slot_key,
        )
    )
    if not attachment:
        raise LedgerNotFoundError(f'Attachment with slot key "{slot_key}" not found')
    return attachment


def list_empty_slots(db: Session, action_id: UUID, user_id: str) -> list[LedgerAttachment]:
    """Slots still waiting for data (data IS NULL), oldest first."""
    action = load_action(db, action_id)
    verify_access(db, action.ledger_id, user_id, LedgerRole.VIEWER)
    return list(
        db.scalars(
            select(LedgerAttachment)
            .where(
                LedgerAttachment.action_id == action_id,
                LedgerAttachment.data.is_(None),
            )
            .order_by(LedgerAttachment.created_at.asc(), LedgerAttachment.id.asc())
        )
    )


def delete_attachment(
    db: Session, attachment_id: UUID, user: CurrentUser, action_id: UUID | None = None
) -> None:
    attachment = _load_attachment(db, attachment_id, action_id)
    action = load_action(db, attachment.action_id)
    verify_access(db, action.ledger_id, user.user_id, LedgerRole.EDITOR)

    db.delete(attachment)
    db.flush()
    logger.info(
        "Ledger attachment deleted slot=%s",
        attachment.slot_key,
        extra=build_log_context(
            user_id=user.user_id, ledger_id=action.ledger_id, action_id=action.id
        ),
    )
