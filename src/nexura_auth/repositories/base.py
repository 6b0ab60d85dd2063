"""Storage contracts and shared helpers for repositories."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Protocol

import redis
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError  # pool exhausted

from nexura_auth.core.exceptions import StorageUnavailableError
from nexura_auth.core.types import Challenge

logger = logging.getLogger(__name__)

STORAGE_CONNECTIVITY_ERRORS: tuple[type[Exception], ...] = (
    OperationalError,
    InterfaceError,
    PoolTimeoutError,
    redis.exceptions.ConnectionError,
    redis.exceptions.TimeoutError,
)


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Re-raise backend connectivity failures as `StorageUnavailableError`."""
    try:
        yield
    except STORAGE_CONNECTIVITY_ERRORS as err:
        logger.error("Storage unavailable during %s: %s", operation, err)
        raise StorageUnavailableError(operation) from err


class ChallengeRepository(Protocol):
    """Shared challenge store reachable from every server instance."""

    def get(self, address: str) -> Challenge | None:
        """Return the current challenge for `address`, if any."""
        ...

    def put(self, challenge: Challenge) -> None:
        """Store `challenge`, replacing whatever was stored for its address."""
        ...

    def consume(self, address: str, message: str, now: datetime) -> Challenge | None:
        """Atomically mark the matching, unexpired, unconsumed challenge as consumed.

        Returns the consumed challenge, or None when no row satisfied the condition.
        """
        ...

    def delete_expired(self, now: datetime) -> int:
        """Physically remove challenges whose expiry has passed."""
        ...
