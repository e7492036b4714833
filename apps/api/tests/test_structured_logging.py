"""Tests for structured logging helpers."""

import uuid

from app.core.structured_logging import build_log_context


def test_build_log_context_includes_only_provided_fields():
    ledger_id = uuid.uuid4()
    context = build_log_context(
        user_id="user-1",
        ledger_id=ledger_id,
        request_id="req-1",
        route="/ledgers",
        method="GET",
    )

    assert context == {
        "user_id": "user-1",
        "ledger_id": str(ledger_id),
        "request_id": "req-1",
        "route": "/ledgers",
        "method": "GET",
    }


def test_build_log_context_ignores_empty_fields():
    context = build_log_context(
        user_id="",
        ledger_id=None,
        action_id=None,
        request_id="req-1",
    )

    assert context == {"request_id": "req-1"}
