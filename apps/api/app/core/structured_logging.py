"""Structured logging helpers."""

import logging
from typing import Any

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """Root logging setup for the API process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )


def build_log_context(
    *,
    user_id: str | None = None,
    ledger_id: Any = None,
    action_id: Any = None,
    request_id: str | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a log context dict for `extra=`, dropping empty fields."""
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = user_id
    if ledger_id:
        context["ledger_id"] = str(ledger_id)
    if action_id:
        context["action_id"] = str(action_id)
    if request_id:
        context["request_id"] = request_id
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context
