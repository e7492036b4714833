"""Attachment slots: creation, uniqueness, fills and empty-slot queries."""

import uuid

import pytest
from sqlalchemy import select

from app.db.enums import LedgerStatusUpdateType
from app.db.models import LedgerAttachment, LedgerStatusUpdate
from app.services import attachment_service
from app.services.ledger_service import LedgerValidationError


@pytest.fixture
async def action_id(client, u1) -> str:
    resp = await client.post("/ledgers", json={"title": "Memorial Plan"}, headers=u1.headers)
    ledger_id = resp.json()["id"]
    resp = await client.post(
        f"/ledgers/{ledger_id}/actions", json={"title": "Book venue"}, headers=u1.headers
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


def _fills(db) -> list[LedgerStatusUpdate]:
    db.expire_all()
    return list(
        db.scalars(
            select(LedgerStatusUpdate)
            .where(LedgerStatusUpdate.type == LedgerStatusUpdateType.ATTACHMENT_FILLED.value)
            .order_by(LedgerStatusUpdate.created_at)
        )
    )


@pytest.mark.asyncio
async def test_empty_slot_is_not_audited(client, db, u1, action_id):
    resp = await client.post(
        f"/actions/{action_id}/attachments",
        json={"type": "LINK", "slot_key": "link-obituary"},
        headers=u1.headers,
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["data"] is None
    assert body["slot_key"] == "link-obituary"
    assert _fills(db) == []


@pytest.mark.asyncio
async def test_filled_create_is_audited(client, db, u1, action_id):
    resp = await client.post(
        f"/actions/{action_id}/attachments",
        json={"type": "UNDERWORLD_QUERY", "data": {"queryText": "funeral homes near me"}},
        headers=u1.headers,
    )
    assert resp.status_code == 201, resp.text
    assert resp.json()["slot_key"] == "underworld-query"

    fills = _fills(db)
    assert len(fills) == 1
    assert fills[0].message == 'Attachment slot "underworld-query" filled'
    assert fills[0].metadata_ == {
        "attachmentType": "UNDERWORLD_QUERY",
        "slotKey": "underworld-query",
    }


@pytest.mark.asyncio
async def test_duplicate_slot_key_conflicts(client, u1, action_id):
    url = f"/actions/{action_id}/attachments"
    first = await client.post(url, json={"type": "UNDERWORLD_QUERY"}, headers=u1.headers)
    assert first.status_code == 201

    second = await client.post(url, json={"type": "UNDERWORLD_QUERY"}, headers=u1.headers)
    assert second.status_code == 409
    assert second.json()["error"] == "CONFLICT"

    explicit = await client.post(
        url, json={"type": "NOTE", "slot_key": "underworld-query"}, headers=u1.headers
    )
    assert explicit.status_code == 409


@pytest.mark.asyncio
async def test_multi_slot_type_allows_many(client, u1, action_id):
    url = f"/actions/{action_id}/attachments"
    keys = set()
    for text in ("one", "two", "three"):
        resp = await client.post(
            url, json={"type": "NOTE", "data": {"text": text}}, headers=u1.headers
        )
        assert resp.status_code == 201
        keys.add(resp.json()["slot_key"])
    assert len(keys) == 3


@pytest.mark.asyncio
async def test_invalid_payload_rejected(client, u1, action_id):
    resp = await client.post(
        f"/actions/{action_id}/attachments",
        json={"type": "LINK", "data": {"url": "nope"}},
        headers=u1.headers,
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "VALIDATION_ERROR"
    assert body["message"] == "Invalid URL format"


@pytest.mark.asyncio
async def test_fill_reports_was_empty_once(client, db, u1, action_id):
    resp = await client.post(
        f"/actions/{action_id}/attachments", json={"type": "NOTE"}, headers=u1.headers
    )
    attachment = resp.json()
    url = f"/actions/{action_id}/attachments/{attachment['id']}"

    first = await client.patch(url, json={"data": {"text": "Draft"}}, headers=u1.headers)
    assert first.status_code == 200, first.text
    assert first.json()["data"] == {"text": "Draft"}

    second = await client.patch(url, json={"data": {"text": "Final"}}, headers=u1.headers)
    assert second.status_code == 200
    assert second.json()["data"] == {"text": "Final"}

    fills = _fills(db)
    assert [f.metadata_["wasEmpty"] for f in fills] == [True, False]
    assert fills[0].message.endswith("filled")
    assert fills[1].message.endswith("updated")


@pytest.mark.asyncio
async def test_fill_without_data_is_rejected(client, db, u1, action_id):
    resp = await client.post(
        f"/actions/{action_id}/attachments",
        json={"type": "NOTE", "slot_key": "n"},
        headers=u1.headers,
    )
    attachment = resp.json()
    url = f"/actions/{action_id}/attachments/{attachment['id']}"

    assert (await client.patch(url, json={}, headers=u1.headers)).status_code == 422
    assert _fills(db) == []

    resp = await client.patch(url, json={"data": {"text": "hi"}}, headers=u1.headers)
    assert resp.status_code == 200

    resp = await client.patch(url, json={"data": None}, headers=u1.headers)
    assert resp.status_code == 422

    resp = await client.patch(url, json={"data": {"text": "again"}}, headers=u1.headers)
    assert resp.status_code == 200
    assert resp.json()["data"] == {"text": "again"}

    fills = _fills(db)
    assert [f.metadata_["wasEmpty"] for f in fills] == [True, False]

    with pytest.raises(LedgerValidationError, match="required"):
        attachment_service.fill_attachment(db, uuid.UUID(attachment["id"]), None, u1.user)
    db.rollback()
    db.expire_all()
    assert db.get(LedgerAttachment, uuid.UUID(attachment["id"])).data == {"text": "again"}


@pytest.mark.asyncio
async def test_fill_validates_against_stored_type(client, u1, action_id):
    resp = await client.post(
        f"/actions/{action_id}/attachments",
        json={"type": "MEMORIAL_REFERENCE"},
        headers=u1.headers,
    )
    attachment = resp.json()

    resp = await client.patch(
        f"/actions/{action_id}/attachments/{attachment['id']}",
        json={"data": {"text": "not a memorial"}},
        headers=u1.headers,
    )
    assert resp.status_code == 400
    assert "memorialId" in resp.json()["message"]


@pytest.mark.asyncio
async def test_empty_slots_and_slot_lookup(client, u1, action_id):
    url = f"/actions/{action_id}/attachments"
    await client.post(url, json={"type": "UNDERWORLD_QUERY"}, headers=u1.headers)
    await client.post(
        url,
        json={"type": "UNDERWORLD_BUSINESS_REFERENCE", "data": {"businessId": "b1"}},
        headers=u1.headers,
    )

    empty = await client.get(f"{url}/empty", headers=u1.headers)
    assert empty.status_code == 200
    assert [a["slot_key"] for a in empty.json()] == ["underworld-query"]

    everything = await client.get(url, headers=u1.headers)
    assert [a["slot_key"] for a in everything.json()] == [
        "underworld-query",
        "selected-business",
    ]

    found = await client.get(f"{url}/slot/selected-business", headers=u1.headers)
    assert found.status_code == 200
    assert found.json()["data"] == {"businessId": "b1"}

    missing = await client.get(f"{url}/slot/selected-service", headers=u1.headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_delete_attachment(client, u1, action_id):
    url = f"/actions/{action_id}/attachments"
    created = (await client.post(url, json={"type": "NOTE"}, headers=u1.headers)).json()

    resp = await client.delete(f"{url}/{created['id']}", headers=u1.headers)
    assert resp.json() == {"deleted": True}

    resp = await client.get(f"{url}/{created['id']}", headers=u1.headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_attachment_under_wrong_action_is_not_found(client, u1, action_id):
    created = (
        await client.post(
            f"/actions/{action_id}/attachments", json={"type": "NOTE"}, headers=u1.headers
        )
    ).json()

    resp = await client.get(
        f"/actions/{uuid.uuid4()}/attachments/{created['id']}", headers=u1.headers
    )
    assert resp.status_code == 404
