"""Status update (audit trail) API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_current_user, get_db
from app.db.enums import LedgerStatusUpdateType
from app.schemas.auth import CurrentUser
from app.schemas.ledger_status_update import NoteCreate, StatusUpdatePage, StatusUpdateRead
from app.services import status_update_service
from app.utils.pagination import CursorPage

router = APIRouter()


def _limit_query():
    return Query(
        settings.STATUS_UPDATE_DEFAULT_LIMIT,
        ge=1,
        le=settings.STATUS_UPDATE_MAX_LIMIT,
        description=f"Page size (max {settings.STATUS_UPDATE_MAX_LIMIT})",
    )


def _to_page(page: CursorPage) -> StatusUpdatePage:
    return StatusUpdatePage(
        items=[StatusUpdateRead.model_validate(u) for u in page.items],
        has_more=page.has_more,
        next_cursor=page.next_cursor,
    )


@router.post(
    "/ledgers/{ledger_id}/status-updates",
    response_model=StatusUpdateRead,
    status_code=status.HTTP_201_CREATED,
)
def create_note(
    ledger_id: UUID,
    data: NoteCreate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Post a note to the ledger's trail (any role, viewers included)."""
    note = status_update_service.create_note(db, ledger_id, data, user)
    db.commit()
    return note


@router.get("/ledgers/{ledger_id}/status-updates", response_model=StatusUpdatePage)
def list_status_updates(
    ledger_id: UUID,
    limit: int = _limit_query(),
    cursor: UUID | None = Query(None, description="id of the last item of the previous page"),
    update_type: LedgerStatusUpdateType | None = Query(None, alias="type"),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Ledger trail, newest first."""
    page = status_update_service.list_status_updates(
        db, ledger_id, user.user_id, limit=limit, cursor=cursor, update_type=update_type
    )
    return _to_page(page)


@router.get("/actions/{action_id}/status-updates", response_model=StatusUpdatePage)
def list_action_status_updates(
    action_id: UUID,
    limit: int = _limit_query(),
    cursor: UUID | None = Query(None),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    page = status_update_service.list_action_status_updates(
        db, action_id, user.user_id, limit=limit, cursor=cursor
    )
    return _to_page(page)


# /recent must be registered before /{status_update_id}
@router.get("/status-updates/recent", response_model=StatusUpdatePage)
def list_recent_status_updates(
    limit: int = _limit_query(),
    cursor: UUID | None = Query(None),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Newest events across all ledgers the caller can see."""
    page = status_update_service.list_recent_status_updates(
        db, user.user_id, limit=limit, cursor=cursor
    )
    return _to_page(page)


@router.get("/status-updates/{status_update_id}", response_model=StatusUpdateRead)
def get_status_update(
    status_update_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return status_update_service.get_status_update(db, status_update_id, user.user_id)
