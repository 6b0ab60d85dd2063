"""Background purge of expired challenges and sessions.

Expiry is always enforced when a row is read, so this worker only reclaims
space. It deletes rows whose `expires_at` has passed, which the consume
predicate already refuses, so it never competes with an in-flight login.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from nexura_auth.core.exceptions import StorageUnavailableError
from nexura_auth.db.time import utcnow
from nexura_auth.repositories.base import ChallengeRepository
from nexura_auth.services.session import SessionStore

logger = logging.getLogger(__name__)


def purge_expired(
    challenges: ChallengeRepository,
    sessions: SessionStore,
    clock: Callable[[], datetime] = utcnow,
) -> tuple[int, int]:
    """Delete expired rows; returns `(challenges_removed, sessions_removed)`."""
    removed_challenges = challenges.delete_expired(clock())
    removed_sessions = sessions.purge_expired()
    if removed_challenges or removed_sessions:
        logger.info(
            "Purged %d expired challenge(s) and %d expired session(s)",
            removed_challenges,
            removed_sessions,
        )
    return removed_challenges, removed_sessions


class ExpiryCleanupWorker:
    """Periodically runs `purge_expired` on a background task."""

    def __init__(
        self,
        challenges: ChallengeRepository,
        sessions: SessionStore,
        interval_seconds: float,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._challenges = challenges
        self._sessions = sessions
        self._clock = clock
        self._interval = max(0.1, float(interval_seconds))
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    async def start(self) -> None:
        """Start the background cleanup loop."""
        if self._task is None or self._task.done():
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the background cleanup loop."""
        if self._task is None:
            return

        self._stopping.set()
        await self._task
        self._task = None

    async def run_once(self) -> tuple[int, int]:
        return await asyncio.to_thread(purge_expired, self._challenges, self._sessions, self._clock)

    async def _run(self) -> None:
        while not self._stopping.is_set():
            try:
                await self.run_once()
            except StorageUnavailableError:
                logger.warning("Expiry cleanup skipped: storage unavailable")
            except Exception:  # noqa: BLE001
                logger.exception("Expiry cleanup pass failed; retrying in %.1fs", self._interval)
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self._interval)
            except TimeoutError:
                continue
