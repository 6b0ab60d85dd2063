"""Lookup and creation of wallet users."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from nexura_auth.models import WalletUser
from nexura_auth.repositories.base import storage_errors


class UserRepository:
    """Wallet user directory keyed by lower-case address."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def find_user_id(self, address: str) -> str | None:
        with storage_errors("user lookup"), self._session_factory() as db:
            return db.scalars(
                select(WalletUser.user_id).where(WalletUser.address == address)
            ).first()

    def record_login(self, address: str, now: datetime) -> str:
        """Return the user id for `address`, creating the user on first login.

        Also stamps `last_login_at`. Two first logins racing on the same
        address both end up with the row that won the unique constraint.
        """
        with storage_errors("user upsert"), self._session_factory() as db:
            user = db.scalars(select(WalletUser).where(WalletUser.address == address)).first()
            if user is None:
                user = WalletUser(address=address, created_at=now, last_login_at=now)
                db.add(user)
                try:
                    db.flush()
                    user_id = user.user_id
                    db.commit()
                    return user_id
                except IntegrityError:
                    db.rollback()
                    user = db.scalars(
                        select(WalletUser).where(WalletUser.address == address)
                    ).one()
            user.last_login_at = now
            user_id = user.user_id
            db.commit()
            return user_id
