"""Durable storage for session tokens."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, update
from sqlalchemy.orm import Session, sessionmaker

from nexura_auth.core.types import SessionRecord
from nexura_auth.db.time import as_utc
from nexura_auth.models import SessionToken
from nexura_auth.repositories.base import storage_errors


class SessionRepository:
    """Single-row operations on the `session_token` table."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def insert(self, record: SessionRecord) -> None:
        with storage_errors("session insert"), self._session_factory() as db:
            db.add(
                SessionToken(
                    token_hash=record.token_hash,
                    address=record.address,
                    user_id=record.user_id,
                    created_at=record.created_at,
                    expires_at=record.expires_at,
                    revoked=record.revoked,
                )
            )
            db.commit()

    def get(self, token_hash: str) -> SessionRecord | None:
        with storage_errors("session lookup"), self._session_factory() as db:
            row = db.get(SessionToken, token_hash)
            if row is None:
                return None
            return SessionRecord(
                token_hash=row.token_hash,
                address=row.address,
                user_id=row.user_id,
                created_at=as_utc(row.created_at),
                expires_at=as_utc(row.expires_at),
                revoked=row.revoked,
            )

    def revoke(self, token_hash: str) -> bool:
        """Mark a session revoked; returns False when nothing changed."""
        stmt = (
            update(SessionToken)
            .where(SessionToken.token_hash == token_hash, SessionToken.revoked.is_(False))
            .values(revoked=True)
            .execution_options(synchronize_session=False)
        )
        with storage_errors("session revoke"), self._session_factory() as db:
            changed = db.execute(stmt).rowcount
            db.commit()
            return changed > 0

    def revoke_for_address(self, address: str, now: datetime) -> int:
        stmt = (
            update(SessionToken)
            .where(
                SessionToken.address == address,
                SessionToken.revoked.is_(False),
                SessionToken.expires_at > now,
            )
            .values(revoked=True)
            .execution_options(synchronize_session=False)
        )
        with storage_errors("session revoke"), self._session_factory() as db:
            changed = db.execute(stmt).rowcount
            db.commit()
            return changed

    def delete_expired(self, now: datetime) -> int:
        stmt = (
            delete(SessionToken)
            .where(SessionToken.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        with storage_errors("session purge"), self._session_factory() as db:
            removed = db.execute(stmt).rowcount
            db.commit()
            return removed
