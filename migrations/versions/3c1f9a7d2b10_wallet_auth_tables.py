"""wallet auth tables

Revision ID: 3c1f9a7d2b10
Revises:
Create Date: 2026-10-19 10:30:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1f9a7d2b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create challenge, session and wallet user tables."""
    op.create_table(
        "auth_challenge",
        sa.Column("address", sa.String(length=42), nullable=False),
        sa.Column("nonce", sa.String(length=64), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("issued_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("consumed", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("address"),
        sa.UniqueConstraint("nonce"),
    )
    op.create_index("ix_auth_challenge_expires_at", "auth_challenge", ["expires_at"])

    op.create_table(
        "session_token",
        sa.Column("token_hash", sa.String(length=64), nullable=False),
        sa.Column("address", sa.String(length=42), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revoked", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("token_hash"),
    )
    op.create_index("ix_session_token_address", "session_token", ["address"])
    op.create_index("ix_session_token_expires_at", "session_token", ["expires_at"])

    op.create_table(
        "wallet_user",
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("address", sa.String(length=42), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("user_id"),
        sa.UniqueConstraint("address"),
    )


def downgrade() -> None:
    """Drop wallet auth tables."""
    op.drop_table("wallet_user")
    op.drop_index("ix_session_token_expires_at", table_name="session_token")
    op.drop_index("ix_session_token_address", table_name="session_token")
    op.drop_table("session_token")
    op.drop_index("ix_auth_challenge_expires_at", table_name="auth_challenge")
    op.drop_table("auth_challenge")
