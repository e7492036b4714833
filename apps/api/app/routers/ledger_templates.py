"""Template catalog and scaffolding API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.core.deps import get_catalog, get_current_user, get_db
from app.core.ledger_catalog import LedgerCatalog
from app.core.rate_limit import limiter
from app.schemas.auth import CurrentUser
from app.schemas.ledger_template import (
    ActionPreview,
    ApplyActionsRequest,
    ApplyTemplateRequest,
    AppliedTemplateResult,
    TemplateRead,
)
from app.services import template_service

router = APIRouter()


@router.get("/templates", response_model=list[TemplateRead])
def list_templates(
    user: CurrentUser = Depends(get_current_user),
    catalog: LedgerCatalog = Depends(get_catalog),
):
    return template_service.list_templates(catalog)


@router.get("/templates/{template_id}", response_model=TemplateRead)
def get_template(
    template_id: str,
    user: CurrentUser = Depends(get_current_user),
    catalog: LedgerCatalog = Depends(get_catalog),
):
    return template_service.get_template(catalog, template_id)


@router.get("/action-definitions", response_model=list[ActionPreview])
def list_action_definitions(
    user: CurrentUser = Depends(get_current_user),
    catalog: LedgerCatalog = Depends(get_catalog),
):
    """Every action type with the slots it scaffolds."""
    return template_service.list_action_definitions(catalog)


@router.post(
    "/ledgers/{ledger_id}/apply-template",
    response_model=AppliedTemplateResult,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("30/minute")
def apply_template(
    request: Request,
    ledger_id: UUID,
    data: ApplyTemplateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    catalog: LedgerCatalog = Depends(get_catalog),
):
    """Scaffold a template's actions (with empty slots) onto the ledger."""
    result = template_service.apply_template(db, catalog, ledger_id, data.template_id, user)
    db.commit()
    return result


@router.post(
    "/ledgers/{ledger_id}/apply-actions",
    response_model=AppliedTemplateResult,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("30/minute")
def apply_actions(
    request: Request,
    ledger_id: UUID,
    data: ApplyActionsRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    catalog: LedgerCatalog = Depends(get_catalog),
):
    """Scaffold an ad-hoc list of action types onto the ledger."""
    result = template_service.apply_custom_actions(
        db, catalog, ledger_id, data.action_types, user
    )
    db.commit()
    return result


@router.get("/ledgers/{ledger_id}/suggestions", response_model=list[ActionPreview])
def suggest_actions(
    ledger_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    catalog: LedgerCatalog = Depends(get_catalog),
):
    """Heuristic next steps for the ledger (nothing is created)."""
    return template_service.suggest_actions(db, catalog, ledger_id, user.user_id)
