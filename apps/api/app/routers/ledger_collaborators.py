"""Collaborator API endpoints (nested under /ledgers/{ledger_id})."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db
from app.schemas.auth import CurrentUser
from app.schemas.ledger import DeletedResponse
from app.schemas.ledger_collaborator import (
    CollaboratorAdd,
    CollaboratorRead,
    CollaboratorRoleUpdate,
)
from app.services import collaborator_service

router = APIRouter()


@router.post("", response_model=CollaboratorRead, status_code=status.HTTP_201_CREATED)
def add_collaborator(
    ledger_id: UUID,
    data: CollaboratorAdd,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Share the ledger with a user as EDITOR or VIEWER (owner only)."""
    collaborator = collaborator_service.add_collaborator(db, ledger_id, data, user)
    db.commit()
    return collaborator


@router.get("", response_model=list[CollaboratorRead])
def list_collaborators(
    ledger_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return collaborator_service.list_collaborators(db, ledger_id, user.user_id)


@router.get("/{collaborator_id}", response_model=CollaboratorRead)
def get_collaborator(
    ledger_id: UUID,
    collaborator_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return collaborator_service.get_collaborator(
        db, collaborator_id, user.user_id, ledger_id=ledger_id
    )


@router.patch("/{collaborator_id}", response_model=CollaboratorRead)
def update_collaborator_role(
    ledger_id: UUID,
    collaborator_id: UUID,
    data: CollaboratorRoleUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Change a collaborator's role (owner only)."""
    collaborator = collaborator_service.update_collaborator_role(
        db, collaborator_id, data.role, user, ledger_id=ledger_id
    )
    db.commit()
    return collaborator


@router.delete("/{collaborator_id}", response_model=DeletedResponse)
def remove_collaborator(
    ledger_id: UUID,
    collaborator_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Remove a collaborator (owner), or leave the ledger (the collaborator)."""
    collaborator_service.remove_collaborator(db, collaborator_id, user, ledger_id=ledger_id)
    db.commit()
    return DeletedResponse()
