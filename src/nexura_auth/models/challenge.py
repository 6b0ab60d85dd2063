# src/nexura_auth/models/challenge.py
"""One-time login challenges keyed by wallet address."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nexura_auth.db.session import Base


class AuthChallenge(Base):
    """The single outstanding challenge for an address.

    Issuing a new challenge overwrites the row, so only the most recent
    message for an address can ever be consumed.
    """

    __tablename__ = "auth_challenge"

    address: Mapped[str] = mapped_column(String(42), primary_key=True)
    nonce: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    consumed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
