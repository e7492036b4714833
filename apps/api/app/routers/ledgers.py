"""Ledger API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db
from app.schemas.auth import CurrentUser
from app.schemas.ledger import (
    DeletedResponse,
    LedgerCreate,
    LedgerListItem,
    LedgerRead,
    LedgerRoleResponse,
    LedgerUpdate,
)
from app.services import ledger_service

router = APIRouter()

NESTED_INCLUDES = {"all", "nested"}


@router.post("", response_model=LedgerRead, status_code=status.HTTP_201_CREATED)
def create_ledger(
    data: LedgerCreate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a ledger owned by the caller."""
    ledger = ledger_service.create_ledger(db, data, user)
    db.commit()
    return ledger_service.to_ledger_read(db, ledger)


@router.get("", response_model=list[LedgerListItem])
def list_ledgers(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List ledgers the caller owns or collaborates on."""
    return ledger_service.list_ledgers(db, user.user_id)


@router.get("/{ledger_id}", response_model=LedgerRead)
def get_ledger(
    ledger_id: UUID,
    include: str | None = Query(None, description="'all' to embed actions, collaborators and recent updates"),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ledger_service.get_ledger(
        db, ledger_id, user.user_id, include_nested=include in NESTED_INCLUDES
    )


@router.patch("/{ledger_id}", response_model=LedgerRead)
def update_ledger(
    ledger_id: UUID,
    data: LedgerUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update title/description/link (owner only)."""
    ledger = ledger_service.update_ledger(db, ledger_id, data, user)
    db.commit()
    return ledger_service.to_ledger_read(db, ledger)


@router.delete("/{ledger_id}", response_model=DeletedResponse)
def delete_ledger(
    ledger_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a ledger with all its actions, slots, collaborators and history (owner only)."""
    ledger_service.delete_ledger(db, ledger_id, user)
    db.commit()
    return DeletedResponse()


@router.get("/{ledger_id}/role", response_model=LedgerRoleResponse)
def get_my_role(
    ledger_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Caller's role on the ledger, or null when they have none."""
    return LedgerRoleResponse(role=ledger_service.get_user_role(db, ledger_id, user.user_id))
