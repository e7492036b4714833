"""Ledger service - CRUD and role-based access control for ledgers."""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.structured_logging import build_log_context
from app.db.enums import LEDGER_ROLE_RANK, LedgerRole
from app.db.models import Ledger, LedgerAction, LedgerCollaborator, LedgerStatusUpdate
from app.schemas.auth import CurrentUser
from app.schemas.ledger import LedgerCreate, LedgerListItem, LedgerRead, LedgerUpdate
from app.schemas.ledger_action import ActionListItem
from app.schemas.ledger_collaborator import CollaboratorRead
from app.schemas.ledger_status_update import StatusUpdateRead
from app.services import ledger_activity_service

logger = logging.getLogger(__name__)


class LedgerServiceError(Exception):
    """Base exception for ledger service errors."""

    pass


class LedgerNotFoundError(LedgerServiceError):
    """Ledger, action, attachment, collaborator or status update not found."""

    pass


class LedgerForbiddenError(LedgerServiceError):
    """Caller lacks the role required for the operation."""

    pass


class LedgerValidationError(LedgerServiceError):
    """Input violates a domain rule."""

    pass


class LedgerConflictError(LedgerServiceError):
    """Uniqueness violation (duplicate slot key or collaborator)."""

    pass


# =============================================================================
# Access control
# =============================================================================


def get_user_role(db: Session, ledger_id: UUID, user_id: str) -> LedgerRole | None:
    """
    Resolve a user's role on a ledger.

    Owner wins over any collaborator row. Returns None when the ledger does
    not exist or the user has no access.
    """
    ledger = db.get(Ledger, ledger_id)
    if not ledger:
        return None
    return _role_on(db, ledger, user_id)


def _role_on(db: Session, ledger: Ledger, user_id: str) -> LedgerRole | None:
    if ledger.owner_user_id == user_id:
        return LedgerRole.OWNER
    role = db.scalar(
        select(LedgerCollaborator.role).where(
            LedgerCollaborator.ledger_id == ledger.id,
            LedgerCollaborator.user_id == user_id,
        )
    )
    return LedgerRole(role) if role else None


def verify_access(
    db: Session,
    ledger_id: UUID,
    user_id: str,
    required_role: LedgerRole = LedgerRole.VIEWER,
) -> Ledger:
    """
    Check that user_id holds at least required_role on the ledger.

    Returns the ledger so callers don't re-fetch it.

    Raises:
        LedgerNotFoundError: Ledger doesn't exist
        LedgerForbiddenError: No access, or role ranks below required_role
    """
    ledger = db.get(Ledger, ledger_id)
    if not ledger:
        raise LedgerNotFoundError(f"Ledger {ledger_id} not found")

    role = _role_on(db, ledger, user_id)
    if role is None:
        logger.info(
            "Ledger access denied",
            extra=build_log_context(user_id=user_id, ledger_id=ledger_id),
        )
        raise LedgerForbiddenError("You do not have access to this ledger")
    if LEDGER_ROLE_RANK[role] < LEDGER_ROLE_RANK[required_role]:
        raise LedgerForbiddenError(f"This operation requires {required_role.value} role")
    return ledger


# =============================================================================
# Ledger CRUD
# =============================================================================


def create_ledger(db: Session, data: LedgerCreate, user: CurrentUser) -> Ledger:
    """Create a ledger owned by the caller and log LEDGER_CREATED."""
    ledger = Ledger(
        owner_user_id=user.user_id,
        title=data.title,
        description=data.description,
        linked_entity_type=data.linked_entity_type,
        linked_entity_id=data.linked_entity_id,
    )
    db.add(ledger)
    db.flush()

    ledger_activity_service.log_ledger_created(db, ledger.id, ledger.title, user)

    logger.info(
        "Ledger created",
        extra=build_log_context(user_id=user.user_id, ledger_id=ledger.id),
    )
    return ledger


def get_ledger(
    db: Session, ledger_id: UUID, user_id: str, include_nested: bool = False
) -> LedgerRead:
    """Get a ledger (VIEWER+), optionally with actions, collaborators and recent updates."""
    ledger = verify_access(db, ledger_id, user_id, LedgerRole.VIEWER)
    return to_ledger_read(db, ledger, include_nested=include_nested)


def to_ledger_read(db: Session, ledger: Ledger, include_nested: bool = False) -> LedgerRead:
    read = LedgerRead(
        id=ledger.id,
        owner_user_id=ledger.owner_user_id,
        title=ledger.title,
        description=ledger.description,
        linked_entity_type=ledger.linked_entity_type,
        linked_entity_id=ledger.linked_entity_id,
        created_at=ledger.created_at,
        updated_at=ledger.updated_at,
    )
    if not include_nested:
        return read

    read.actions = _list_action_items(db, ledger.id)
    read.collaborators = [
        CollaboratorRead.model_validate(c)
        for c in db.scalars(
            select(LedgerCollaborator)
            .where(LedgerCollaborator.ledger_id == ledger.id)
            .order_by(LedgerCollaborator.added_at.desc(), LedgerCollaborator.id.desc())
        )
    ]
    read.status_updates = [
        StatusUpdateRead.model_validate(u)
        for u in db.scalars(
            select(LedgerStatusUpdate)
            .where(LedgerStatusUpdate.ledger_id == ledger.id)
            .order_by(LedgerStatusUpdate.created_at.desc(), LedgerStatusUpdate.id.desc())
            .limit(settings.LEDGER_RECENT_UPDATES_LIMIT)
        )
    ]
    return read


def _list_action_items(db: Session, ledger_id: UUID) -> list[ActionListItem]:
    # Local import: action_service imports this module for verify_access
    from app.services.action_service import list_action_items

    return list_action_items(db, ledger_id)


def list_ledgers(db: Session, user_id: str) -> list[LedgerListItem]:
    """
    List ledgers the user owns or collaborates on, newest first.

    Counts are computed with correlated subqueries to avoid N+1 loads.
    """
    action_count = (
        select(func.count(LedgerAction.id))
        .where(LedgerAction.ledger_id == Ledger.id)
        .correlate(Ledger)
        .scalar_subquery()
    )
    collaborator_count = (
        select(func.count(LedgerCollaborator.id))
        .where(LedgerCollaborator.ledger_id == Ledger.id)
        .correlate(Ledger)
        .scalar_subquery()
    )
    shared_ids = select(LedgerCollaborator.ledger_id).where(
        LedgerCollaborator.user_id == user_id
    )

    rows = db.execute(
        select(Ledger, action_count, collaborator_count)
        .where((Ledger.owner_user_id == user_id) | Ledger.id.in_(shared_ids))
        .order_by(Ledger.created_at.desc(), Ledger.id.desc())
    ).all()

    return [
        LedgerListItem(
            id=ledger.id,
            owner_user_id=ledger.owner_user_id,
            title=ledger.title,
            description=ledger.description,
            linked_entity_type=ledger.linked_entity_type,
            linked_entity_id=ledger.linked_entity_id,
            action_count=actions or 0,
            collaborator_count=collaborators or 0,
            created_at=ledger.created_at,
            updated_at=ledger.updated_at,
        )
        for ledger, actions, collaborators in rows
    ]


def update_ledger(
    db: Session, ledger_id: UUID, data: LedgerUpdate, user: CurrentUser
) -> Ledger:
    """Partially update a ledger (OWNER only). Only fields sent by the client change."""
    ledger = verify_access(db, ledger_id, user.user_id, LedgerRole.OWNER)

    changes = data.model_dump(exclude_unset=True)
    if "title" in changes and changes["title"] is None:
        raise LedgerValidationError("Title cannot be null")
    for field, value in changes.items():
        setattr(ledger, field, value)

    db.flush()
    logger.info(
        "Ledger updated",
        extra=build_log_context(user_id=user.user_id, ledger_id=ledger_id),
    )
    return ledger


def delete_ledger(db: Session, ledger_id: UUID, user: CurrentUser) -> None:
    """Delete a ledger and everything under it (OWNER only)."""
    ledger = verify_access(db, ledger_id, user.user_id, LedgerRole.OWNER)
    db.delete(ledger)
    db.flush()
    logger.info(
        "Ledger deleted",
        extra=build_log_context(user_id=user.user_id, ledger_id=ledger_id),
    )
