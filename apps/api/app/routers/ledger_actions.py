"""Ledger action API endpoints (nested under /ledgers/{ledger_id})."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db
from app.schemas.auth import CurrentUser
from app.schemas.ledger import DeletedResponse
from app.schemas.ledger_action import ActionCreate, ActionListItem, ActionRead, ActionUpdate
from app.services import action_service

router = APIRouter()


@router.post("", response_model=ActionRead, status_code=status.HTTP_201_CREATED)
def create_action(
    ledger_id: UUID,
    data: ActionCreate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create an action (editor or owner)."""
    action = action_service.create_action(db, ledger_id, data, user)
    db.commit()
    return action


@router.get("", response_model=list[ActionListItem])
def list_actions(
    ledger_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return action_service.list_actions(db, ledger_id, user.user_id)


@router.get("/{action_id}", response_model=ActionRead)
def get_action(
    ledger_id: UUID,
    action_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get an action with its attachment slots."""
    return action_service.get_action(db, action_id, user.user_id, ledger_id=ledger_id)


@router.patch("/{action_id}", response_model=ActionRead)
def update_action(
    ledger_id: UUID,
    action_id: UUID,
    data: ActionUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update title, description or status. Status changes are audited."""
    action = action_service.update_action(db, action_id, data, user, ledger_id=ledger_id)
    db.commit()
    return action


@router.delete("/{action_id}", response_model=DeletedResponse)
def delete_action(
    ledger_id: UUID,
    action_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    action_service.delete_action(db, action_id, user, ledger_id=ledger_id)
    db.commit()
    return DeletedResponse()
