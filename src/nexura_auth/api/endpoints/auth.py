# src/nexura_auth/api/endpoints/auth.py
"""Wallet authentication endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from nexura_auth.api.dependencies import optional_bearer_token
from nexura_auth.api.providers import ChallengeIssuerDep, SessionStoreDep, WalletAuthServiceDep
from nexura_auth.core.types import IssuedSession
from nexura_auth.schemas.auth import (
    ChallengeRequest,
    ChallengeResponse,
    LogoutResponse,
    WalletLoginRequest,
    WalletLoginResponse,
)

router = APIRouter(tags=["authentication"])

OptionalTokenDep = Annotated[str | None, Depends(optional_bearer_token)]


def _login_response(issued: IssuedSession) -> WalletLoginResponse:
    return WalletLoginResponse(
        access_token=issued.token,
        expires_at=issued.expires_at,
        address=issued.address,
        user_id=issued.user_id,
    )


@router.get(
    "/challenge",
    summary="Issue a wallet login challenge",
    response_model=ChallengeResponse,
)
def get_challenge(
    address: Annotated[str, Query(min_length=1, max_length=64)],
    issuer: ChallengeIssuerDep,
) -> ChallengeResponse:
    """Return a fresh message for `address` to sign, replacing any earlier one."""
    return ChallengeResponse(message=issuer.issue_challenge(address))


@router.post(
    "/challenge",
    summary="Issue a wallet login challenge",
    response_model=ChallengeResponse,
)
def post_challenge(payload: ChallengeRequest, issuer: ChallengeIssuerDep) -> ChallengeResponse:
    """Body-based variant of `GET /challenge`."""
    return ChallengeResponse(message=issuer.issue_challenge(payload.address))


@router.post(
    "/auth/simple",
    summary="Exchange a signed challenge for a session token",
    status_code=status.HTTP_200_OK,
    response_model=WalletLoginResponse,
)
def login_simple(payload: WalletLoginRequest, auth: WalletAuthServiceDep) -> WalletLoginResponse:
    """Verify the signature, consume the challenge and open a session."""
    return _login_response(auth.authenticate(payload.address, payload.message, payload.signature))


@router.post(
    "/auth/wallet",
    summary="Exchange a signed challenge for a session token",
    status_code=status.HTTP_200_OK,
    response_model=WalletLoginResponse,
)
def login_wallet(payload: WalletLoginRequest, auth: WalletAuthServiceDep) -> WalletLoginResponse:
    """Same contract and code path as `/auth/simple`."""
    return _login_response(auth.authenticate(payload.address, payload.message, payload.signature))


@router.post(
    "/auth/logout",
    summary="Revoke the presented session",
    response_model=LogoutResponse,
)
def logout(token: OptionalTokenDep, sessions: SessionStoreDep) -> LogoutResponse:
    """Revoke the bearer token if one is presented. Always succeeds."""
    if token is not None:
        sessions.revoke_session(token)
    return LogoutResponse()
