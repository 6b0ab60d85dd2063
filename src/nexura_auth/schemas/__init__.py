"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .auth import (
    ChallengeRequest,
    ChallengeResponse,
    IdentityResponse,
    LogoutResponse,
    WalletLoginRequest,
    WalletLoginResponse,
)

__all__ = [
    "ChallengeRequest", "ChallengeResponse",
    "IdentityResponse",
    "LogoutResponse",
    "WalletLoginRequest", "WalletLoginResponse",
]
