"""Wallet authentication Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ChallengeRequest(BaseModel):
    """Request to obtain a login challenge for an address."""

    address: str = Field(..., min_length=1, max_length=64, description="0x-prefixed account address")


class ChallengeResponse(BaseModel):
    """Challenge text the wallet must sign."""

    message: str = Field(..., description="Human-readable message embedding a one-time nonce")


class WalletLoginRequest(BaseModel):
    """Signed challenge submitted to a login endpoint."""

    address: str = Field(..., min_length=1, max_length=64, description="Claimed signer address")
    message: str = Field(..., min_length=1, max_length=2048, description="Challenge text exactly as issued")
    signature: str = Field(..., min_length=1, max_length=256, description="Hex-encoded 65-byte signature")


class WalletLoginResponse(BaseModel):
    """Session returned after a successful wallet login."""

    access_token: str = Field(..., alias="accessToken", description="Opaque bearer token")
    token_type: str = Field("bearer", alias="tokenType", description="Always 'bearer'")
    expires_at: datetime = Field(..., alias="expiresAt", description="Session expiry (UTC)")
    address: str = Field(..., description="Lower-case address the session is bound to")
    user_id: str = Field(..., alias="userId", description="Wallet user identifier")

    model_config = ConfigDict(populate_by_name=True)


class IdentityResponse(BaseModel):
    """Identity resolved from the presented session token."""

    address: str = Field(..., description="Lower-case wallet address")
    user_id: str = Field(..., alias="userId", description="Wallet user identifier")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class LogoutResponse(BaseModel):
    """Logout acknowledgement."""

    success: bool = True
