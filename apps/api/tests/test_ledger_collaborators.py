"""Collaborator sharing rules and their audit events."""

import pytest
from sqlalchemy import select

from app.db.enums import LedgerStatusUpdateType
from app.db.models import LedgerStatusUpdate


@pytest.fixture
async def ledger_id(client, u1) -> str:
    resp = await client.post("/ledgers", json={"title": "Memorial Plan"}, headers=u1.headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


async def _add(client, owner, ledger_id, user_id, role):
    return await client.post(
        f"/ledgers/{ledger_id}/collaborators",
        json={"user_id": user_id, "role": role},
        headers=owner.headers,
    )


def _last_event(db, update_type) -> LedgerStatusUpdate:
    db.expire_all()
    return db.scalars(
        select(LedgerStatusUpdate)
        .where(LedgerStatusUpdate.type == update_type.value)
        .order_by(LedgerStatusUpdate.created_at.desc())
    ).first()


@pytest.mark.asyncio
async def test_add_collaborator(client, db, u1, ledger_id):
    resp = await _add(client, u1, ledger_id, "u2", "EDITOR")
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["user_id"] == "u2"
    assert body["role"] == "EDITOR"
    assert body["added_by_user_id"] == "u1"

    event = _last_event(db, LedgerStatusUpdateType.COLLABORATOR_ADDED)
    assert event.message == "Collaborator added with EDITOR role"
    assert event.metadata_ == {"collaboratorUserId": "u2", "role": "EDITOR"}


@pytest.mark.asyncio
async def test_owner_cannot_be_added(client, u1, ledger_id):
    resp = await _add(client, u1, ledger_id, "u1", "EDITOR")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Cannot add the owner as a collaborator"


@pytest.mark.asyncio
async def test_owner_role_cannot_be_granted(client, u1, ledger_id):
    resp = await _add(client, u1, ledger_id, "u2", "OWNER")
    assert resp.status_code == 400
    assert "OWNER" in resp.json()["message"]

    added = await _add(client, u1, ledger_id, "u2", "VIEWER")
    resp = await client.patch(
        f"/ledgers/{ledger_id}/collaborators/{added.json()['id']}",
        json={"role": "OWNER"},
        headers=u1.headers,
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_duplicate_collaborator_conflicts(client, u1, ledger_id):
    assert (await _add(client, u1, ledger_id, "u2", "EDITOR")).status_code == 201
    resp = await _add(client, u1, ledger_id, "u2", "VIEWER")
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_only_owner_can_share(client, u1, u2, ledger_id):
    await _add(client, u1, ledger_id, "u2", "EDITOR")
    resp = await _add(client, u2, ledger_id, "u3", "VIEWER")
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_role_change_is_audited(client, db, u1, ledger_id):
    added = (await _add(client, u1, ledger_id, "u2", "VIEWER")).json()

    resp = await client.patch(
        f"/ledgers/{ledger_id}/collaborators/{added['id']}",
        json={"role": "EDITOR"},
        headers=u1.headers,
    )
    assert resp.status_code == 200
    assert resp.json()["role"] == "EDITOR"

    event = _last_event(db, LedgerStatusUpdateType.COLLABORATOR_ROLE_CHANGED)
    assert event.message == "Collaborator role changed from VIEWER to EDITOR"
    assert event.metadata_ == {
        "collaboratorUserId": "u2",
        "oldRole": "VIEWER",
        "newRole": "EDITOR",
    }


@pytest.mark.asyncio
async def test_collaborator_can_leave(client, db, u1, u2, ledger_id):
    added = (await _add(client, u1, ledger_id, "u2", "EDITOR")).json()

    resp = await client.delete(
        f"/ledgers/{ledger_id}/collaborators/{added['id']}", headers=u2.headers
    )
    assert resp.status_code == 200

    event = _last_event(db, LedgerStatusUpdateType.COLLABORATOR_REMOVED)
    assert event.message == "Collaborator left the ledger"
    assert event.metadata_["removedBySelf"] is True

    resp = await client.get(f"/ledgers/{ledger_id}", headers=u2.headers)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_owner_removes_collaborator(client, db, u1, ledger_id):
    added = (await _add(client, u1, ledger_id, "u2", "VIEWER")).json()

    resp = await client.delete(
        f"/ledgers/{ledger_id}/collaborators/{added['id']}", headers=u1.headers
    )
    assert resp.json() == {"deleted": True}

    event = _last_event(db, LedgerStatusUpdateType.COLLABORATOR_REMOVED)
    assert event.message == "Collaborator removed"
    assert event.metadata_ == {
        "collaboratorUserId": "u2",
        "role": "VIEWER",
        "removedBySelf": False,
    }


@pytest.mark.asyncio
async def test_other_collaborator_cannot_remove(client, u1, u3, ledger_id):
    added = (await _add(client, u1, ledger_id, "u2", "EDITOR")).json()
    await _add(client, u1, ledger_id, "u3", "EDITOR")

    resp = await client.delete(
        f"/ledgers/{ledger_id}/collaborators/{added['id']}", headers=u3.headers
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_list_and_get_collaborators(client, u1, u2, ledger_id):
    await _add(client, u1, ledger_id, "u2", "EDITOR")
    added = (await _add(client, u1, ledger_id, "u3", "VIEWER")).json()

    resp = await client.get(f"/ledgers/{ledger_id}/collaborators", headers=u2.headers)
    assert resp.status_code == 200
    assert {c["user_id"] for c in resp.json()} == {"u2", "u3"}

    resp = await client.get(
        f"/ledgers/{ledger_id}/collaborators/{added['id']}", headers=u2.headers
    )
    assert resp.json()["role"] == "VIEWER"


@pytest.mark.asyncio
async def test_shared_ledgers_are_listed(client, u1, u2, ledger_id):
    await _add(client, u1, ledger_id, "u2", "VIEWER")
    resp = await client.post("/ledgers", json={"title": "Private"}, headers=u1.headers)
    assert resp.status_code == 201

    mine = await client.get("/ledgers", headers=u1.headers)
    assert len(mine.json()) == 2

    shared = await client.get("/ledgers", headers=u2.headers)
    items = shared.json()
    assert [item["id"] for item in items] == [ledger_id]
    assert items[0]["collaborator_count"] == 1
    assert items[0]["action_count"] == 0
