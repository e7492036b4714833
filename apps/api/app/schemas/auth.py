"""Authentication-related Pydantic schemas."""

from pydantic import BaseModel


class TokenPayload(BaseModel):
    """Decoded bearer token payload issued by the auth service."""
    sub: str  # user_id
    email: str


class CurrentUser(BaseModel):
    """
    Principal for authenticated requests.

    Returned by the get_current_user dependency. Ledger authorization is
    resolved per ledger from this user_id; the token carries no roles.
    """
    user_id: str
    email: str
