# src/nexura_auth/models/wallet_user.py
"""Wallet-backed user accounts."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from nexura_auth.db.session import Base
from nexura_auth.db.time import utcnow


class WalletUser(Base):
    """A user record created the first time an address logs in."""

    __tablename__ = "wallet_user"

    user_id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    address: Mapped[str] = mapped_column(String(42), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
