"""Session token issuance, validation and revocation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from nexura_auth.core.security import fingerprint, generate_session_token, hash_token
from nexura_auth.core.settings import settings
from nexura_auth.core.types import Identity, IssuedSession, SessionRecord
from nexura_auth.db.time import utcnow
from nexura_auth.repositories.session_repo import SessionRepository

logger = logging.getLogger(__name__)


class SessionStore:
    """Durable, shared record of issued session tokens.

    Every operation is a single-row statement against the database, so any
    number of server processes can share one store.
    """

    def __init__(
        self,
        repository: SessionRepository,
        *,
        ttl_seconds: int | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._repository = repository
        self._ttl = timedelta(
            seconds=settings.session_ttl_seconds if ttl_seconds is None else ttl_seconds
        )
        self._clock = clock

    def create_session(self, address: str, user_id: str) -> IssuedSession:
        """Mint a new opaque token bound to `address` and `user_id`."""
        token = generate_session_token()
        now = self._clock()
        record = SessionRecord(
            token_hash=hash_token(token),
            address=address.lower(),
            user_id=user_id,
            created_at=now,
            expires_at=now + self._ttl,
        )
        self._repository.insert(record)
        logger.info("Created session %s for %s", fingerprint(token), record.address)
        return IssuedSession(
            token=token,
            address=record.address,
            user_id=user_id,
            expires_at=record.expires_at,
        )

    def validate_session(self, token: str) -> Identity | None:
        """Return the bound identity, or None if the token is unknown, revoked or expired.

        A session is valid strictly before `expires_at`.
        """
        record = self._repository.get(hash_token(token))
        if record is None:
            logger.info("Session %s rejected: unknown", fingerprint(token))
            return None
        if record.revoked:
            logger.info("Session %s rejected: revoked", fingerprint(token))
            return None
        if self._clock() >= record.expires_at:
            logger.info("Session %s rejected: expired", fingerprint(token))
            return None
        return Identity(address=record.address, user_id=record.user_id)

    def revoke_session(self, token: str) -> None:
        """Revoke `token`. Unknown or already revoked tokens are not an error."""
        if self._repository.revoke(hash_token(token)):
            logger.info("Revoked session %s", fingerprint(token))

    def revoke_address(self, address: str) -> int:
        """Revoke every live session of `address`; returns how many were revoked."""
        revoked = self._repository.revoke_for_address(address.lower(), self._clock())
        logger.info("Revoked %d session(s) for %s", revoked, address.lower())
        return revoked

    def purge_expired(self) -> int:
        """Delete sessions whose expiry has passed."""
        return self._repository.delete_expired(self._clock())
