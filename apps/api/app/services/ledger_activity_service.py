"""Ledger audit trail writer - the only code that inserts status updates."""

from uuid import UUID

from sqlalchemy.orm import Session

from app.db.enums import (
    ACTION_STATUS_LABELS,
    LedgerActionStatus,
    LedgerAttachmentType,
    LedgerRole,
    LedgerStatusUpdateType,
)
from app.db.models import LedgerStatusUpdate
from app.schemas.auth import CurrentUser


def log_activity(
    db: Session,
    ledger_id: UUID,
    update_type: LedgerStatusUpdateType,
    actor: CurrentUser | None = None,
    message: str | None = None,
    metadata: dict | None = None,
    action_id: UUID | None = None,
) -> LedgerStatusUpdate:
    """
    Append a status update to a ledger's audit trail.

    Args:
        db: Database session
        ledger_id: Ledger the event belongs to
        update_type: Event kind
        actor: User who performed the action (None for system)
        message: Human-readable summary
        metadata: Type-specific details as JSON
        action_id: Set for action-scoped events

    Returns:
        The created status update
    """
    update = LedgerStatusUpdate(
        ledger_id=ledger_id,
        action_id=action_id,
        type=update_type.value,
        actor_user_id=actor.user_id if actor else None,
        actor_email=actor.email if actor else None,
        message=message,
        metadata_=metadata,
    )
    db.add(update)
    db.flush()  # Don't commit - let caller control transaction
    return update


def log_ledger_created(
    db: Session, ledger_id: UUID, title: str, actor: CurrentUser
) -> LedgerStatusUpdate:
    return log_activity(
        db=db,
        ledger_id=ledger_id,
        update_type=LedgerStatusUpdateType.LEDGER_CREATED,
        actor=actor,
        message=f'Ledger "{title}" created',
    )


def log_action_created(
    db: Session,
    ledger_id: UUID,
    action_id: UUID,
    title: str,
    actor: CurrentUser,
    action_type: str | None = None,
) -> LedgerStatusUpdate:
    """Log action creation; action_type is set when scaffolded from the catalog."""
    if action_type is None:
        message = f'Action "{title}" created'
        metadata = None
    else:
        message = f'Action "{title}" created from template'
        metadata = {"actionType": action_type, "fromTemplate": True}
    return log_activity(
        db=db,
        ledger_id=ledger_id,
        action_id=action_id,
        update_type=LedgerStatusUpdateType.ACTION_CREATED,
        actor=actor,
        message=message,
        metadata=metadata,
    )


def log_action_status_changed(
    db: Session,
    ledger_id: UUID,
    action_id: UUID,
    old_status: LedgerActionStatus,
    new_status: LedgerActionStatus,
    actor: CurrentUser,
) -> LedgerStatusUpdate:
    return log_activity(
        db=db,
        ledger_id=ledger_id,
        action_id=action_id,
        update_type=LedgerStatusUpdateType.ACTION_STATUS_CHANGED,
        actor=actor,
        message=(
            f"Action status changed from {ACTION_STATUS_LABELS[old_status]} "
            f"to {ACTION_STATUS_LABELS[new_status]}"
        ),
        metadata={"oldStatus": old_status.value, "newStatus": new_status.value},
    )


def log_attachment_filled(
    db: Session,
    ledger_id: UUID,
    action_id: UUID,
    attachment_type: LedgerAttachmentType,
    slot_key: str,
    actor: CurrentUser,
    was_empty: bool | None = None,
) -> LedgerStatusUpdate:
    """
    Log data landing in a slot.

    was_empty is None for data supplied at creation time; fills of an
    existing slot pass True/False and get "filled"/"updated" wording.
    """
    metadata = {"attachmentType": attachment_type.value, "slotKey": slot_key}
    verb = "filled"
    if was_empty is not None:
        metadata["wasEmpty"] = was_empty
        verb = "filled" if was_empty else "updated"
    return log_activity(
        db=db,
        ledger_id=ledger_id,
        action_id=action_id,
        update_type=LedgerStatusUpdateType.ATTACHMENT_FILLED,
        actor=actor,
        message=f'Attachment slot "{slot_key}" {verb}',
        metadata=metadata,
    )


def log_collaborator_added(
    db: Session,
    ledger_id: UUID,
    collaborator_user_id: str,
    role: LedgerRole,
    actor: CurrentUser,
) -> LedgerStatusUpdate:
    return log_activity(
        db=db,
        ledger_id=ledger_id,
        update_type=LedgerStatusUpdateType.COLLABORATOR_ADDED,
        actor=actor,
        message=f"Collaborator added with {role.value} role",
        metadata={"collaboratorUserId": collaborator_user_id, "role": role.value},
    )


def log_collaborator_role_changed(
    db: Session,
    ledger_id: UUID,
    collaborator_user_id: str,
    old_role: LedgerRole,
    new_role: LedgerRole,
    actor: CurrentUser,
) -> LedgerStatusUpdate:
    return log_activity(
        db=db,
        ledger_id=ledger_id,
        update_type=LedgerStatusUpdateType.COLLABORATOR_ROLE_CHANGED,
        actor=actor,
        message=f"Collaborator role changed from {old_role.value} to {new_role.value}",
        metadata={
            "collaboratorUserId": collaborator_user_id,
            "oldRole": old_role.value,
            "newRole": new_role.value,
        },
    )


def log_collaborator_removed(
    db: Session,
    ledger_id: UUID,
    collaborator_user_id: str,
    role: LedgerRole,
    removed_by_self: bool,
    actor: CurrentUser,
) -> LedgerStatusUpdate:
    return log_activity(
        db=db,
        ledger_id=ledger_id,
        update_type=LedgerStatusUpdateType.COLLABORATOR_REMOVED,
        actor=actor,
        message="Collaborator left the ledger" if removed_by_self else "Collaborator removed",
        metadata={
            "collaboratorUserId": collaborator_user_id,
            "role": role.value,
            "removedBySelf": removed_by_self,
        },
    )


def log_user_note(
    db: Session,
    ledger_id: UUID,
    message: str,
    actor: CurrentUser,
    action_id: UUID | None = None,
) -> LedgerStatusUpdate:
    return log_activity(
        db=db,
        ledger_id=ledger_id,
        action_id=action_id,
        update_type=LedgerStatusUpdateType.USER_NOTE,
        actor=actor,
        message=message,
    )
