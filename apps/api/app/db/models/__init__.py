"""SQLAlchemy ORM models."""

from app.db.models.ledger import (
    Ledger,
    LedgerAction,
    LedgerAttachment,
    LedgerCollaborator,
    LedgerStatusUpdate,
)

__all__ = [
    "Ledger",
    "LedgerAction",
    "LedgerAttachment",
    "LedgerCollaborator",
    "LedgerStatusUpdate",
]
