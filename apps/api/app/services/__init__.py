"""Service layer modules."""

from app.services.ledger_service import (
    LedgerConflictError,
    LedgerForbiddenError,
    LedgerNotFoundError,
    LedgerServiceError,
    LedgerValidationError,
    get_user_role,
    verify_access,
)

# Import service modules (not individual functions) for cleaner access
from app.services import ledger_activity_service
from app.services import ledger_service
from app.services import action_service
from app.services import attachment_service
from app.services import collaborator_service
from app.services import status_update_service
from app.services import template_service

__all__ = [
    # Errors
    "LedgerServiceError",
    "LedgerNotFoundError",
    "LedgerForbiddenError",
    "LedgerValidationError",
    "LedgerConflictError",
    # Access control
    "verify_access",
    "get_user_role",
    # Service modules
    "ledger_activity_service",
    "ledger_service",
    "action_service",
    "attachment_service",
    "collaborator_service",
    "status_update_service",
    "template_service",
]
