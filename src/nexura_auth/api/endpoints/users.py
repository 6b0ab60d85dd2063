# src/nexura_auth/api/endpoints/users.py
"""Endpoints for the authenticated caller."""

from fastapi import APIRouter

from nexura_auth.api.dependencies import CurrentIdentityDep
from nexura_auth.schemas.auth import IdentityResponse

router = APIRouter(prefix="/api", tags=["users"])


@router.get("/me", response_model=IdentityResponse)
def read_me(identity: CurrentIdentityDep) -> IdentityResponse:
    """Return the address and user id bound to the presented session."""
    return IdentityResponse(address=identity.address.lower(), user_id=identity.user_id)
