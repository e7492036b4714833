"""Role hierarchy and access checks."""

import uuid

import pytest

from app.db.enums import LEDGER_ROLE_RANK, LedgerRole
from app.schemas.ledger import LedgerCreate
from app.schemas.ledger_collaborator import CollaboratorAdd
from app.services import collaborator_service, ledger_service
from app.services.ledger_service import (
    LedgerForbiddenError,
    LedgerNotFoundError,
    get_user_role,
    verify_access,
)


@pytest.fixture
def ledger(db, u1):
    ledger = ledger_service.create_ledger(db, LedgerCreate(title="Memorial Plan"), u1.user)
    db.commit()
    return ledger


def _share(db, ledger, owner, user_id, role):
    collaborator_service.add_collaborator(
        db, ledger.id, CollaboratorAdd(user_id=user_id, role=role), owner.user
    )
    db.commit()


def test_owner_role_resolved(db, ledger, u1):
    assert get_user_role(db, ledger.id, u1.user_id) == LedgerRole.OWNER


def test_unknown_ledger_has_no_role(db, u1):
    assert get_user_role(db, uuid.uuid4(), u1.user_id) is None


def test_stranger_has_no_role(db, ledger, u3):
    assert get_user_role(db, ledger.id, u3.user_id) is None
    with pytest.raises(LedgerForbiddenError):
        verify_access(db, ledger.id, u3.user_id, LedgerRole.VIEWER)


def test_missing_ledger_is_not_found(db, u1):
    with pytest.raises(LedgerNotFoundError):
        verify_access(db, uuid.uuid4(), u1.user_id, LedgerRole.VIEWER)


@pytest.mark.parametrize("held", [LedgerRole.EDITOR, LedgerRole.VIEWER])
@pytest.mark.parametrize("required", list(LedgerRole))
def test_collaborator_passes_iff_rank_suffices(db, ledger, u1, u2, held, required):
    _share(db, ledger, u1, u2.user_id, held)

    if LEDGER_ROLE_RANK[held] >= LEDGER_ROLE_RANK[required]:
        assert verify_access(db, ledger.id, u2.user_id, required).id == ledger.id
    else:
        with pytest.raises(LedgerForbiddenError):
            verify_access(db, ledger.id, u2.user_id, required)


@pytest.mark.parametrize("required", list(LedgerRole))
def test_owner_always_passes(db, ledger, u1, required):
    assert verify_access(db, ledger.id, u1.user_id, required).id == ledger.id


def test_role_endpoint_reports_collaborator_role(db, ledger, u1, u2):
    _share(db, ledger, u1, u2.user_id, LedgerRole.EDITOR)
    assert get_user_role(db, ledger.id, u2.user_id) == LedgerRole.EDITOR


@pytest.mark.asyncio
async def test_role_endpoint(client, u1, u3):
    resp = await client.post("/ledgers", json={"title": "Plan"}, headers=u1.headers)
    assert resp.status_code == 201, resp.text
    ledger_id = resp.json()["id"]

    mine = await client.get(f"/ledgers/{ledger_id}/role", headers=u1.headers)
    assert mine.json() == {"role": "OWNER"}

    theirs = await client.get(f"/ledgers/{ledger_id}/role", headers=u3.headers)
    assert theirs.json() == {"role": None}

    missing = await client.get(f"/ledgers/{uuid.uuid4()}/role", headers=u1.headers)
    assert missing.status_code == 200
    assert missing.json() == {"role": None}


@pytest.mark.asyncio
async def test_requests_without_token_are_rejected(client):
    resp = await client.get("/ledgers")
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_requests_with_bad_token_are_rejected(client):
    resp = await client.get("/ledgers", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid token"
