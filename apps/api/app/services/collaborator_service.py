"""Collaborator service - sharing ledgers with EDITOR/VIEWER roles."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.structured_logging import build_log_context
from app.db.enums import LedgerRole
from app.db.models import LedgerCollaborator
from app.schemas.auth import CurrentUser
from app.schemas.ledger_collaborator import CollaboratorAdd
from app.services import ledger_activity_service
from app.services.ledger_service import (
    LedgerConflictError,
    LedgerForbiddenError,
    LedgerNotFoundError,
    LedgerValidationError,
    verify_access,
)

logger = logging.getLogger(__name__)


def _load_collaborator(
    db: Session, collaborator_id: UUID, ledger_id: UUID | None = None
) -> LedgerCollaborator:
    collaborator = db.get(LedgerCollaborator, collaborator_id)
    if not collaborator or (ledger_id is not None and collaborator.ledger_id != ledger_id):
        raise LedgerNotFoundError(f"Collaborator {collaborator_id} not found")
    return collaborator


def _reject_owner_role(role: LedgerRole) -> None:
    if role == LedgerRole.OWNER:
        raise LedgerValidationError("Cannot assign OWNER role through collaborators")


def add_collaborator(
    db: Session, ledger_id: UUID, data: CollaboratorAdd, user: CurrentUser
) -> LedgerCollaborator:
    """
    Share a ledger with another user (OWNER only).

    Raises:
        LedgerValidationError: Target is the owner, or role is OWNER
        LedgerConflictError: User already collaborates on the ledger
    """
    ledger = verify_access(db, ledger_id, user.user_id, LedgerRole.OWNER)

    if data.user_id == ledger.owner_user_id:
        raise LedgerValidationError("Cannot add the owner as a collaborator")
    _reject_owner_role(data.role)

    existing = db.scalar(
        select(LedgerCollaborator.id).where(
            LedgerCollaborator.ledger_id == ledger_id,
            LedgerCollaborator.user_id == data.user_id,
        )
    )
    if existing:
        raise LedgerConflictError("User is already a collaborator on this ledger")

    collaborator = LedgerCollaborator(
        ledger_id=ledger_id,
        user_id=data.user_id,
        role=data.role.value,
        added_by_user_id=user.user_id,
    )
    db.add(collaborator)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise LedgerConflictError("User is already a collaborator on this ledger")

    ledger_activity_service.log_collaborator_added(
        db, ledger_id, data.user_id, data.role, user
    )

    logger.info(
        "Ledger collaborator added role=%s",
        data.role.value,
        extra=build_log_context(user_id=user.user_id, ledger_id=ledger_id),
    )
    return collaborator


def update_collaborator_role(
    db: Session,
    collaborator_id: UUID,
    role: LedgerRole,
    user: CurrentUser,
    ledger_id: UUID | None = None,
) -> LedgerCollaborator:
    """Change a collaborator's role (OWNER only). OWNER can't be granted."""
    collaborator = _load_collaborator(db, collaborator_id, ledger_id)
    verify_access(db, collaborator.ledger_id, user.user_id, LedgerRole.OWNER)
    _reject_owner_role(role)

    old_role = LedgerRole(collaborator.role)
    collaborator.role = role.value
    db.flush()

    ledger_activity_service.log_collaborator_role_changed(
        db, collaborator.ledger_id, collaborator.user_id, old_role, role, user
    )

    logger.info(
        "Ledger collaborator role changed %s -> %s",
        old_role.value,
        role.value,
        extra=build_log_context(user_id=user.user_id, ledger_id=collaborator.ledger_id),
    )
    return collaborator


def remove_collaborator(
    db: Session,
    collaborator_id: UUID,
    user: CurrentUser,
    ledger_id: UUID | None = None,
) -> None:
    """
    Revoke a collaborator's access.

    Allowed for the ledger owner and for the collaborator themselves
    (leaving). Anyone else gets LedgerForbiddenError.
    """
    collaborator = _load_collaborator(db, collaborator_id, ledger_id)
    ledger = collaborator.ledger

    is_owner = ledger.owner_user_id == user.user_id
    is_self = collaborator.user_id == user.user_id
    if not is_owner and not is_self:
        raise LedgerForbiddenError(
            "Only the owner or the collaborator themselves can remove access"
        )

    owning_ledger_id = collaborator.ledger_id
    removed_user_id = collaborator.user_id
    role = LedgerRole(collaborator.role)

    db.delete(collaborator)
    db.flush()

    ledger_activity_service.log_collaborator_removed(
        db, owning_ledger_id, removed_user_id, role, is_self, user
    )

    logger.info(
        "Ledger collaborator removed self=%s",
        is_self,
        extra=build_log_context(user_id=user.user_id, ledger_id=owning_ledger_id),
    )


def list_collaborators(
    db: Session, ledger_id: UUID, user_id: str
) -> list[LedgerCollaborator]:
    """Collaborators of a ledger (VIEWER+), most recently added first."""
    verify_access(db, ledger_id, user_id, LedgerRole.VIEWER)
    return list(
        db.scalars(
            select(LedgerCollaborator)
            .where(LedgerCollaborator.ledger_id == ledger_id)
            .order_by(LedgerCollaborator.added_at.desc(), LedgerCollaborator.id.desc())
        )
    )


def get_collaborator(
    db: Session, collaborator_id: UUID, user_id: str, ledger_id: UUID | None = None
) -> LedgerCollaborator:
    collaborator = _load_collaborator(db, collaborator_id, ledger_id)
    verify_access(db, collaborator.ledger_id, user_id, LedgerRole.VIEWER)
    return collaborator
