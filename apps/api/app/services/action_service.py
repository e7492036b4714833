"""Ledger action service - work items and their status lifecycle."""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.core.structured_logging import build_log_context
from app.db.enums import DEFAULT_ACTION_STATUS, LedgerActionStatus, LedgerRole
from app.db.models import LedgerAction, LedgerAttachment
from app.schemas.auth import CurrentUser
from app.schemas.ledger_action import ActionCreate, ActionListItem, ActionUpdate
from app.services import ledger_activity_service
from app.services.ledger_service import (
    LedgerNotFoundError,
    LedgerValidationError,
    verify_access,
)

logger = logging.getLogger(__name__)


def load_action(db: Session, action_id: UUID, ledger_id: UUID | None = None) -> LedgerAction:
    """
    Fetch an action by id without access checks.

    When ledger_id is given, an action from another ledger is reported as
    not found so nested routes can't address foreign rows.
    """
    action = db.get(LedgerAction, action_id)
    if not action or (ledger_id is not None and action.ledger_id != ledger_id):
        raise LedgerNotFoundError(f"Action {action_id} not found")
    return action


def create_action(
    db: Session, ledger_id: UUID, data: ActionCreate, user: CurrentUser
) -> LedgerAction:
    """Create an action (EDITOR+) in NOT_HANDLED state and log ACTION_CREATED."""
    verify_access(db, ledger_id, user.user_id, LedgerRole.EDITOR)

    action = LedgerAction(
        ledger_id=ledger_id,
        title=data.title,
        description=data.description,
        status=DEFAULT_ACTION_STATUS.value,
        creator_user_id=user.user_id,
        creator_email=user.email,
    )
    db.add(action)
    db.flush()

    ledger_activity_service.log_action_created(db, ledger_id, action.id, action.title, user)

    logger.info(
        "Ledger action created",
        extra=build_log_context(user_id=user.user_id, ledger_id=ledger_id, action_id=action.id),
    )
    return action


def get_action(
    db: Session, action_id: UUID, user_id: str, ledger_id: UUID | None = None
) -> LedgerAction:
    """Get an action (VIEWER+) with its attachments, oldest slot first."""
    action = db.scalar(
        select(LedgerAction)
        .options(selectinload(LedgerAction.attachments))
        .where(LedgerAction.id == action_id)
        .execution_options(populate_existing=True)
    )
    if not action or (ledger_id is not None and action.ledger_id != ledger_id):
        raise LedgerNotFoundError(f"Action {action_id} not found")
    verify_access(db, action.ledger_id, user_id, LedgerRole.VIEWER)
    return action


def list_action_items(db: Session, ledger_id: UUID) -> list[ActionListItem]:
    """Actions of a ledger, newest first, with attachment counts (no access check)."""
    attachment_count = (
        select(func.count(LedgerAttachment.id))
        .where(LedgerAttachment.action_id == LedgerAction.id)
        .correlate(LedgerAction)
        .scalar_subquery()
    )
    rows = db.execute(
        select(LedgerAction, attachment_count)
        .where(LedgerAction.ledger_id == ledger_id)
        .order_by(LedgerAction.created_at.desc(), LedgerAction.id.desc())
    ).all()
    return [
        ActionListItem(
            id=action.id,
            ledger_id=action.ledger_id,
            title=action.title,
            description=action.description,
            status=action.status,
            creator_user_id=action.creator_user_id,
            creator_email=action.creator_email,
            attachment_count=count or 0,
            created_at=action.created_at,
            updated_at=action.updated_at,
        )
        for action, count in rows
    ]


def list_actions(db: Session, ledger_id: UUID, user_id: str) -> list[ActionListItem]:
    """List actions of a ledger (VIEWER+)."""
    verify_access(db, ledger_id, user_id, LedgerRole.VIEWER)
    return list_action_items(db, ledger_id)


def update_action(
    db: Session,
    action_id: UUID,
    data: ActionUpdate,
    user: CurrentUser,
    ledger_id: UUID | None = None,
) -> LedgerAction:
    """
    Partially update an action (EDITOR+).

    A status change to a different value appends exactly one
    ACTION_STATUS_CHANGED event; title/description edits are not audited.
    """
    action = load_action(db, action_id, ledger_id)
    verify_access(db, action.ledger_id, user.user_id, LedgerRole.EDITOR)

    changes = data.model_dump(exclude_unset=True)
    if "title" in changes and changes["title"] is None:
        raise LedgerValidationError("Title cannot be null")
    if "status" in changes and changes["status"] is None:
        raise LedgerValidationError("Status cannot be null")

    old_status = LedgerActionStatus(action.status)
    new_status = changes.pop("status", None)

    for field, value in changes.items():
        setattr(action, field, value)

    if new_status is not None and new_status != old_status:
        action.status = new_status.value
        db.flush()
        ledger_activity_service.log_action_status_changed(
            db, action.ledger_id, action.id, old_status, new_status, user
        )
        logger.info(
            "Ledger action status changed %s -> %s",
            old_status.value,
            new_status.value,
            extra=build_log_context(
                user_id=user.user_id, ledger_id=action.ledger_id, action_id=action.id
            ),
        )
    else:
        db.flush()

    return action


def delete_action(
    db: Session, action_id: UUID, user: CurrentUser, ledger_id: UUID | None = None
) -> None:
    """
    Delete an action (EDITOR+) and its attachments.

    Status updates that referenced the action stay in the ledger's trail
    with action_id cleared.
    """
    action = load_action(db, action_id, ledger_id)
    verify_access(db, action.ledger_id, user.user_id, LedgerRole.EDITOR)

    owning_ledger_id = action.ledger_id
    db.delete(action)
    db.flush()

    logger.info(
        "Ledger action deleted",
        extra=build_log_context(
            user_id=user.user_id, ledger_id=owning_ledger_id, action_id=action_id
        ),
    )
