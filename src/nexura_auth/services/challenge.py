"""Issuing and consuming one-time wallet login challenges."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from nexura_auth.core.exceptions import InputValidationError
from nexura_auth.core.security import fingerprint, generate_nonce
from nexura_auth.core.settings import settings
from nexura_auth.core.types import Challenge
from nexura_auth.db.time import utcnow
from nexura_auth.repositories.base import ChallengeRepository
from nexura_auth.services.signing import normalize_address

logger = logging.getLogger(__name__)


def build_challenge_message(title: str, address: str, nonce: str, issued_at: datetime) -> str:
    """Return the canonical text a wallet is asked to sign."""
    return (
        f"{title}\n"
        f"Address: {address}\n"
        f"Nonce: {nonce}\n"
        f"Issued At: {issued_at.strftime('%Y-%m-%dT%H:%M:%SZ')}"
    )


class ChallengeIssuer:
    """Service handling the per-address challenge lifecycle."""

    def __init__(
        self,
        repository: ChallengeRepository,
        *,
        ttl_seconds: int | None = None,
        title: str | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._repository = repository
        self._ttl = timedelta(
            seconds=settings.challenge_ttl_seconds if ttl_seconds is None else ttl_seconds
        )
        self._title = settings.login_message_title if title is None else title
        self._clock = clock

    def issue_challenge(self, address: str) -> str:
        """Store a fresh challenge for `address` and return the message to sign.

        Any earlier challenge for the address is overwritten and can no
        longer be consumed.

        Raises:
            InputValidationError: If `address` is not a well-formed account address.
        """
        normalized = normalize_address(address)
        if normalized is None:
            raise InputValidationError("malformed address")

        issued_at = self._clock().replace(microsecond=0)
        nonce = generate_nonce()
        challenge = Challenge(
            address=normalized,
            nonce=nonce,
            message=build_challenge_message(self._title, normalized, nonce, issued_at),
            issued_at=issued_at,
            expires_at=issued_at + self._ttl,
        )
        self._repository.put(challenge)
        logger.info("Issued challenge %s for %s", fingerprint(nonce), normalized)
        return challenge.message

    def consume_challenge(self, address: str, message: str) -> Challenge | None:
        """Consume the pending challenge for `address` if `message` matches it exactly.

        Returns None if there is no challenge, it expired, it was already
        consumed or the text differs. Concurrent callers racing on the same
        challenge see exactly one success.
        """
        normalized = normalize_address(address)
        if normalized is None:
            return None

        now = self._clock()
        consumed = self._repository.consume(normalized, message, now)
        if consumed is not None:
            logger.info("Consumed challenge %s for %s", fingerprint(consumed.nonce), normalized)
            return consumed

        # Diagnose for the server log only; the caller just sees None.
        current = self._repository.get(normalized)
        if current is None:
            reason = "no pending challenge"
        elif current.consumed:
            reason = "already consumed"
        elif current.expires_at <= now:
            reason = "expired"
        else:
            reason = "message mismatch"
        logger.warning("Challenge consume failed for %s: %s", normalized, reason)
        return None
