"""API routers."""

from app.routers.ledgers import router as ledgers_router
from app.routers.ledger_actions import router as ledger_actions_router
from app.routers.ledger_attachments import router as ledger_attachments_router
from app.routers.ledger_collaborators import router as ledger_collaborators_router
from app.routers.ledger_status_updates import router as ledger_status_updates_router
from app.routers.ledger_templates import router as ledger_templates_router

__all__ = [
    "ledgers_router",
    "ledger_actions_router",
    "ledger_attachments_router",
    "ledger_collaborators_router",
    "ledger_status_updates_router",
    "ledger_templates_router",
]
