"""Pydantic schemas for API request/response models."""

from app.schemas.auth import CurrentUser, TokenPayload
from app.schemas.ledger import (
    DeletedResponse,
    LedgerCreate,
    LedgerListItem,
    LedgerRead,
    LedgerRoleResponse,
    LedgerUpdate,
)
from app.schemas.ledger_action import ActionCreate, ActionListItem, ActionRead, ActionUpdate
from app.schemas.ledger_attachment import AttachmentCreate, AttachmentFill, AttachmentRead
from app.schemas.ledger_collaborator import (
    CollaboratorAdd,
    CollaboratorRead,
    CollaboratorRoleUpdate,
)
from app.schemas.ledger_status_update import NoteCreate, StatusUpdatePage, StatusUpdateRead
from app.schemas.ledger_template import (
    ActionPreview,
    AppliedTemplateResult,
    ApplyActionsRequest,
    ApplyTemplateRequest,
    TemplateRead,
)
