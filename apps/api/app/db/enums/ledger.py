"""Ledger-related enums."""

from enum import Enum


class LedgerRole(str, Enum):
    """
    Access level on a ledger.

    OWNER is implied by Ledger.owner_user_id and is never stored on a
    collaborator row.
    """

    OWNER = "OWNER"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"


# Higher rank satisfies any lower requirement
LEDGER_ROLE_RANK: dict[LedgerRole, int] = {
    LedgerRole.OWNER: 3,
    LedgerRole.EDITOR: 2,
    LedgerRole.VIEWER: 1,
}


class LedgerActionStatus(str, Enum):
    """Three-state progress of a ledger action."""

    NOT_HANDLED = "NOT_HANDLED"
    IN_PROGRESS = "IN_PROGRESS"
    HANDLED = "HANDLED"


# Human wording used in status-change audit messages
ACTION_STATUS_LABELS: dict[LedgerActionStatus, str] = {
    LedgerActionStatus.NOT_HANDLED: "not handled",
    LedgerActionStatus.IN_PROGRESS: "in progress",
    LedgerActionStatus.HANDLED: "handled",
}


class LedgerAttachmentType(str, Enum):
    """Payload shape of an attachment slot."""

    NOTE = "NOTE"
    LINK = "LINK"
    FUNDRAISER_REFERENCE = "FUNDRAISER_REFERENCE"
    MEMORIAL_REFERENCE = "MEMORIAL_REFERENCE"
    UNDERWORLD_QUERY = "UNDERWORLD_QUERY"
    UNDERWORLD_BUSINESS_REFERENCE = "UNDERWORLD_BUSINESS_REFERENCE"
    UNDERWORLD_SERVICE_REFERENCE = "UNDERWORLD_SERVICE_REFERENCE"


# Single-slot types: at most one per action, under a fixed key.
# Types missing from this map are multi-slot.
SINGLE_SLOT_KEYS: dict[LedgerAttachmentType, str] = {
    LedgerAttachmentType.UNDERWORLD_QUERY: "underworld-query",
    LedgerAttachmentType.UNDERWORLD_BUSINESS_REFERENCE: "selected-business",
    LedgerAttachmentType.UNDERWORLD_SERVICE_REFERENCE: "selected-service",
}


class LedgerStatusUpdateType(str, Enum):
    """Audit event kinds. Everything except USER_NOTE is system-generated."""

    LEDGER_CREATED = "LEDGER_CREATED"
    ACTION_CREATED = "ACTION_CREATED"
    ACTION_STATUS_CHANGED = "ACTION_STATUS_CHANGED"
    ATTACHMENT_FILLED = "ATTACHMENT_FILLED"
    COLLABORATOR_ADDED = "COLLABORATOR_ADDED"
    COLLABORATOR_ROLE_CHANGED = "COLLABORATOR_ROLE_CHANGED"
    COLLABORATOR_REMOVED = "COLLABORATOR_REMOVED"
    USER_NOTE = "USER_NOTE"


DEFAULT_ACTION_STATUS = LedgerActionStatus.NOT_HANDLED


# A new member without a label or rank fails at import
if set(ACTION_STATUS_LABELS) != set(LedgerActionStatus):
    raise RuntimeError("Every action status needs a label")
if set(LEDGER_ROLE_RANK) != set(LedgerRole):
    raise RuntimeError("Every ledger role needs a rank")
