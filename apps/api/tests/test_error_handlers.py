"""Service errors map to a uniform JSON error body."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.core.error_handlers import register_exception_handlers
from app.services.ledger_service import (
    LedgerConflictError,
    LedgerForbiddenError,
    LedgerNotFoundError,
    LedgerServiceError,
    LedgerValidationError,
)


def _app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    errors = {
        "missing": LedgerNotFoundError("Ledger x not found"),
        "forbidden": LedgerForbiddenError("You do not have access to this ledger"),
        "invalid": LedgerValidationError("Invalid URL format"),
        "conflict": LedgerConflictError("Slot taken"),
        "generic": LedgerServiceError("Something odd"),
    }

    @app.get("/raise/{kind}")
    def raise_error(kind: str):
        if kind == "boom":
            raise RuntimeError("secret internals")
        raise errors[kind]

    return app


@pytest.fixture
async def error_client():
    transport = ASGITransport(app=_app(), raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kind,status_code,error",
    [
        ("missing", 404, "NOT_FOUND"),
        ("forbidden", 403, "FORBIDDEN"),
        ("invalid", 400, "VALIDATION_ERROR"),
        ("conflict", 409, "CONFLICT"),
        ("generic", 500, "INTERNAL_ERROR"),
    ],
)
async def test_service_error_mapping(error_client, kind, status_code, error):
    resp = await error_client.get(f"/raise/{kind}")
    assert resp.status_code == status_code
    body = resp.json()
    assert body["status_code"] == status_code
    assert body["error"] == error
    assert body["path"] == f"/raise/{kind}"
    assert body["timestamp"]


@pytest.mark.asyncio
async def test_unexpected_error_hides_details(error_client, caplog):
    resp = await error_client.get("/raise/boom")
    assert resp.status_code == 500
    body = resp.json()
    assert body["message"] == "Internal server error"
    assert "secret" not in resp.text
    assert "Unhandled error" in caplog.text
