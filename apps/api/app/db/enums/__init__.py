"""Enum definitions for application constants."""

from app.db.enums.ledger import (
    ACTION_STATUS_LABELS,
    DEFAULT_ACTION_STATUS,
    LEDGER_ROLE_RANK,
    SINGLE_SLOT_KEYS,
    LedgerActionStatus,
    LedgerAttachmentType,
    LedgerRole,
    LedgerStatusUpdateType,
)

__all__ = [
    "ACTION_STATUS_LABELS",
    "DEFAULT_ACTION_STATUS",
    "LEDGER_ROLE_RANK",
    "SINGLE_SLOT_KEYS",
    "LedgerActionStatus",
    "LedgerAttachmentType",
    "LedgerRole",
    "LedgerStatusUpdateType",
]
