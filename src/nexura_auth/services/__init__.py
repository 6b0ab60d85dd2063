"""Business logic services for the Nexura auth service."""

from .challenge import ChallengeIssuer
from .maintenance import ExpiryCleanupWorker, purge_expired
from .session import SessionStore
from .signing import SignatureVerifier
from .wallet_auth import WalletAuthService

__all__ = [
    "ChallengeIssuer",
    "ExpiryCleanupWorker",
    "SessionStore",
    "SignatureVerifier",
    "WalletAuthService",
    "purge_expired",
]
