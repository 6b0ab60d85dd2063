"""The wallet login flow shared by every login endpoint."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from nexura_auth.core.exceptions import AuthenticationError, ConflictError, InputValidationError
from nexura_auth.core.types import IssuedSession
from nexura_auth.db.time import utcnow
from nexura_auth.repositories.user_repo import UserRepository
from nexura_auth.services.challenge import ChallengeIssuer
from nexura_auth.services.session import SessionStore
from nexura_auth.services.signing import SignatureVerifier, normalize_address

logger = logging.getLogger(__name__)


class WalletAuthService:
    """Turns a signed challenge into a session."""

    def __init__(
        self,
        issuer: ChallengeIssuer,
        verifier: SignatureVerifier,
        sessions: SessionStore,
        users: UserRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._issuer = issuer
        self._verifier = verifier
        self._sessions = sessions
        self._users = users
        self._clock = clock

    def authenticate(self, address: str, message: str, signature: str) -> IssuedSession:
        """Verify a signed challenge and open a session for its address.

        The signature is checked before the challenge is touched, so a forged
        submission cannot burn a pending challenge.

        Raises:
            InputValidationError: Malformed address.
            AuthenticationError: The signature does not recover to `address`.
            ConflictError: No pending challenge matches, or it was already used.
        """
        normalized = normalize_address(address)
        if normalized is None:
            raise InputValidationError("malformed address")

        if not self._verifier.verify(normalized, message, signature):
            raise AuthenticationError("signature verification failed")

        if self._issuer.consume_challenge(normalized, message) is None:
            raise ConflictError("challenge not consumable")

        user_id = self._users.record_login(normalized, self._clock())
        issued = self._sessions.create_session(normalized, user_id)
        logger.info("Wallet login succeeded for %s", normalized)
        return issued
