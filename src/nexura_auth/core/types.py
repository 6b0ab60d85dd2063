"""Value objects shared between repositories, services and the API layer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Challenge:
    """A one-time login challenge bound to an address."""

    address: str
    nonce: str
    message: str
    issued_at: datetime
    expires_at: datetime
    consumed: bool = False


@dataclass(frozen=True)
class Identity:
    """Principal resolved from a valid session for the current request."""

    address: str
    user_id: str


@dataclass(frozen=True)
class SessionRecord:
    """Stored view of a session; holds the token digest, never the token."""

    token_hash: str
    address: str
    user_id: str
    created_at: datetime
    expires_at: datetime
    revoked: bool = False


@dataclass(frozen=True)
class IssuedSession:
    """A freshly minted session, the only place the raw token exists."""

    token: str
    address: str
    user_id: str
    expires_at: datetime
