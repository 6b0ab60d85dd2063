"""SQLAlchemy models for the Nexura auth service."""

from .challenge import AuthChallenge
from .session_token import SessionToken
from .wallet_user import WalletUser

__all__ = [
    "AuthChallenge",
    "SessionToken",
    "WalletUser",
]
