"""FastAPI dependencies for authentication and database access."""

from typing import Generator

import jwt
from fastapi import HTTPException, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.ledger_catalog import LedgerCatalog, default_catalog
from app.core.security import decode_access_token
from app.db.session import SessionLocal
from app.schemas.auth import CurrentUser, TokenPayload


AUTH_HEADER = "Authorization"
AUTH_SCHEME = "bearer"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(request: Request) -> CurrentUser:
    """
    Resolve the caller from the bearer token.

    The token is minted by the auth service with `sub` (user id) and
    `email` claims. Authorization is decided per ledger by the services.

    Raises:
        HTTPException 401: Authentication failed
    """
    header = request.headers.get(AUTH_HEADER, "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != AUTH_SCHEME or not token:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = TokenPayload.model_validate(decode_access_token(token.strip()))
    except (jwt.InvalidTokenError, ValidationError):
        raise HTTPException(
            status_code=401,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return CurrentUser(user_id=payload.sub, email=payload.email)


def get_catalog() -> LedgerCatalog:
    """Action/template catalog dependency (override in tests to inject another)."""
    return default_catalog
