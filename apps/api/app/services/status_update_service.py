"""Status update service - notes and the read side of the ledger audit trail."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.structured_logging import build_log_context
from app.db.enums import LedgerRole, LedgerStatusUpdateType
from app.db.models import Ledger, LedgerAction, LedgerCollaborator, LedgerStatusUpdate
from app.schemas.auth import CurrentUser
from app.schemas.ledger_status_update import NoteCreate
from app.services import ledger_activity_service
from app.services.action_service import load_action
from app.services.ledger_service import (
    LedgerNotFoundError,
    LedgerValidationError,
    verify_access,
)
from app.utils.pagination import CursorPage, InvalidCursorError, paginate_desc

logger = logging.getLogger(__name__)


def _page(db: Session, stmt, limit: int, cursor: UUID | None) -> CursorPage:
    try:
        return paginate_desc(db, stmt, LedgerStatusUpdate, limit, cursor)
    except InvalidCursorError as e:
        raise LedgerValidationError(str(e)) from e


def create_note(
    db: Session, ledger_id: UUID, data: NoteCreate, user: CurrentUser
) -> LedgerStatusUpdate:
    """
    Post a USER_NOTE (VIEWER+; viewers may comment).

    Raises:
        LedgerNotFoundError: action_id given but the action doesn't exist
        LedgerValidationError: action belongs to another ledger
    """
    verify_access(db, ledger_id, user.user_id, LedgerRole.VIEWER)

    if data.action_id is not None:
        action = db.get(LedgerAction, data.action_id)
        if not action:
            raise LedgerNotFoundError(f"Action {data.action_id} not found")
        if action.ledger_id != ledger_id:
            raise LedgerValidationError("Action does not belong to this ledger")

    note = ledger_activity_service.log_user_note(
        db, ledger_id, data.message, user, action_id=data.action_id
    )

    logger.info(
        "Ledger note added",
        extra=build_log_context(
            user_id=user.user_id, ledger_id=ledger_id, action_id=data.action_id
        ),
    )
    return note


def list_status_updates(
    db: Session,
    ledger_id: UUID,
    user_id: str,
    limit: int,
    cursor: UUID | None = None,
    update_type: LedgerStatusUpdateType | None = None,
) -> CursorPage:
    """Audit trail of one ledger (VIEWER+), newest first, optionally one type."""
    verify_access(db, ledger_id, user_id, LedgerRole.VIEWER)
    stmt = select(LedgerStatusUpdate).where(LedgerStatusUpdate.ledger_id == ledger_id)
    if update_type is not None:
        stmt = stmt.where(LedgerStatusUpdate.type == update_type.value)
    return _page(db, stmt, limit, cursor)


def list_action_status_updates(
    db: Session,
    action_id: UUID,
    user_id: str,
    limit: int,
    cursor: UUID | None = None,
) -> CursorPage:
    """Audit events scoped to one action (VIEWER+ on its ledger)."""
    action = load_action(db, action_id)
    verify_access(db, action.ledger_id, user_id, LedgerRole.VIEWER)
    stmt = select(LedgerStatusUpdate).where(LedgerStatusUpdate.action_id == action_id)
    return _page(db, stmt, limit, cursor)


def list_recent_status_updates(
    db: Session,
    user_id: str,
    limit: int,
    cursor: UUID | None = None,
) -> CursorPage:
    """Newest events across every ledger the user owns or collaborates on."""
    owned = select(Ledger.id).where(Ledger.owner_user_id == user_id)
    shared = select(LedgerCollaborator.ledger_id).where(
        LedgerCollaborator.user_id == user_id
    )
    stmt = select(LedgerStatusUpdate).where(
        LedgerStatusUpdate.ledger_id.in_(owned) | LedgerStatusUpdate.ledger_id.in_(shared)
    )
    return _page(db, stmt, limit, cursor)


def get_status_update(db: Session, status_update_id: UUID, user_id: str) -> LedgerStatusUpdate:
    update = db.get(LedgerStatusUpdate, status_update_id)
    if not update:
        raise LedgerNotFoundError(f"Status update {status_update_id} not found")
    verify_access(db, update.ledger_id, user_id, LedgerRole.VIEWER)
    return update
