"""Attachment payload validation and slot-key rules.

Pure functions, no database access. A None payload always passes: it marks
a slot that is expected but not filled yet.
"""

import random
import string
import time
from typing import Any, Callable

from pydantic import AnyUrl, TypeAdapter, ValidationError

from app.db.enums import SINGLE_SLOT_KEYS, LedgerAttachmentType
from app.services.ledger_service import LedgerValidationError

_BASE36 = string.digits + string.ascii_lowercase
_URL_ADAPTER = TypeAdapter(AnyUrl)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but not a JSON number
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require_text(data: dict, field: str, message: str) -> None:
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise LedgerValidationError(message)


def _optional_str(data: dict, field: str, label: str | None = None) -> None:
    if field in data and not isinstance(data[field], str):
        raise LedgerValidationError(f"{label or field} must be a string")


def _optional_number(data: dict, field: str) -> None:
    if field in data and not _is_number(data[field]):
        raise LedgerValidationError(f"{field} must be a number")


def _validate_note(data: dict) -> None:
    _require_text(data, "text", "Note must have a non-empty text field")


def _validate_link(data: dict) -> None:
    _require_text(data, "url", "Link must have a non-empty url field")
    try:
        _URL_ADAPTER.validate_python(data["url"].strip())
    except ValidationError:
        raise LedgerValidationError("Invalid URL format") from None
    _optional_str(data, "title", "Link title")
    _optional_str(data, "description", "Link description")


def _validate_fundraiser_reference(data: dict) -> None:
    _require_text(
        data,
        "fundraiserId",
        "Fundraiser reference must have a non-empty fundraiserId field",
    )
    _optional_str(data, "snapshotTitle")
    _optional_number(data, "snapshotGoal")


def _validate_memorial_reference(data: dict) -> None:
    _require_text(
        data,
        "memorialId",
        "Memorial reference must have a non-empty memorialId field",
    )
    _optional_str(data, "snapshotDisplayName")


def _validate_underworld_query(data: dict) -> None:
    _require_text(
        data,
        "queryText",
        "Underworld query must have a non-empty queryText field",
    )

    if "categories" in data:
        categories = data["categories"]
        if not isinstance(categories, list) or not all(
            isinstance(c, str) for c in categories
        ):
            raise LedgerValidationError("categories must be an array of strings")

    if "location" in data:
        location = data["location"]
        if (
            not isinstance(location, dict)
            or not _is_number(location.get("lat"))
            or not _is_number(location.get("lng"))
        ):
            raise LedgerValidationError("location must have lat and lng as numbers")

    if "budget" in data:
        budget = data["budget"]
        if not isinstance(budget, dict):
            raise LedgerValidationError("budget must be an object")
        for bound in ("min", "max"):
            if bound in budget and not _is_number(budget[bound]):
                raise LedgerValidationError(f"budget.{bound} must be a number")

    _optional_str(data, "urgency")


def _validate_underworld_business_reference(data: dict) -> None:
    _require_text(
        data,
        "businessId",
        "Underworld business reference must have a non-empty businessId field",
    )
    _optional_str(data, "snapshotName")
    _optional_str(data, "snapshotAddress")


def _validate_underworld_service_reference(data: dict) -> None:
    _require_text(
        data,
        "serviceOfferingId",
        "Underworld service reference must have a non-empty serviceOfferingId field",
    )
    _require_text(
        data,
        "businessId",
        "Underworld service reference must have a non-empty businessId field",
    )
    _optional_str(data, "snapshotTitle")
    _optional_number(data, "snapshotPrice")


VALIDATORS: dict[LedgerAttachmentType, Callable[[dict], None]] = {
    LedgerAttachmentType.NOTE: _validate_note,
    LedgerAttachmentType.LINK: _validate_link,
    LedgerAttachmentType.FUNDRAISER_REFERENCE: _validate_fundraiser_reference,
    LedgerAttachmentType.MEMORIAL_REFERENCE: _validate_memorial_reference,
    LedgerAttachmentType.UNDERWORLD_QUERY: _validate_underworld_query,
    LedgerAttachmentType.UNDERWORLD_BUSINESS_REFERENCE: _validate_underworld_business_reference,
    LedgerAttachmentType.UNDERWORLD_SERVICE_REFERENCE: _validate_underworld_service_reference,
}

if set(VALIDATORS) != set(LedgerAttachmentType):
    raise RuntimeError("Every attachment type needs a validator")


def validate_attachment_data(attachment_type: LedgerAttachmentType, data: Any) -> None:
    """
    Validate a payload against its attachment type.

    Raises:
        LedgerValidationError: Payload is not an object or violates a field rule
    """
    if data is None:
        return
    if not isinstance(data, dict):
        raise LedgerValidationError("Attachment data must be an object or null")
    VALIDATORS[LedgerAttachmentType(attachment_type)](data)


def is_single_slot(attachment_type: LedgerAttachmentType) -> bool:
    """UNDERWORLD_* types allow one slot per action under a fixed key."""
    return attachment_type in SINGLE_SLOT_KEYS


def generate_slot_key(attachment_type: LedgerAttachmentType) -> str:
    """Fixed key for single-slot types, unique generated key otherwise."""
    attachment_type = LedgerAttachmentType(attachment_type)
    if is_single_slot(attachment_type):
        return SINGLE_SLOT_KEYS[attachment_type]
    millis = int(time.time() * 1000)
    suffix = "".join(random.choices(_BASE36, k=7))
    return f"{attachment_type.value.lower()}-{millis}-{suffix}"
