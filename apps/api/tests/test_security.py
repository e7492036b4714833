"""Bearer token verification and secret rotation."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from app.core import security
from app.core.config import settings
from app.core.security import create_access_token, decode_access_token


def _token(secret: str, **overrides) -> str:
    now = datetime.now(timezone.utc)
    payload = {"sub": "u9", "email": "u9@example.com", "iat": now, "exp": now + timedelta(hours=1)}
    payload.update(overrides)
    return jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)


def test_round_trip_claims():
    claims = decode_access_token(create_access_token("u1", "u1@example.com"))
    assert claims["sub"] == "u1"
    assert claims["email"] == "u1@example.com"


def test_previous_secret_accepted_during_rotation(monkeypatch):
    monkeypatch.setattr(security.settings, "JWT_SECRET_PREVIOUS", "old-secret")
    claims = decode_access_token(_token("old-secret"))
    assert claims["sub"] == "u9"


def test_unknown_secret_rejected():
    with pytest.raises(jwt.InvalidTokenError):
        decode_access_token(_token("someone-elses-secret"))


def test_expired_token_rejected():
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    with pytest.raises(jwt.ExpiredSignatureError):
        decode_access_token(_token(settings.JWT_SECRET, iat=past, exp=past + timedelta(hours=1)))


@pytest.mark.asyncio
async def test_token_without_email_is_rejected(client):
    token = jwt.encode({"sub": "u9"}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    resp = await client.get("/ledgers", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_valid_token_lists_empty(client):
    resp = await client.get(
        "/ledgers", headers={"Authorization": f"Bearer {_token(settings.JWT_SECRET)}"}
    )
    assert resp.status_code == 200
    assert resp.json() == []
