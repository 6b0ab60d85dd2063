"""Request authentication for protected endpoints.

Each request walks a small state machine::

    UNAUTHENTICATED -> CREDENTIAL_EXTRACTED -> VALIDATING -> AUTHENTICATED
                                                          \\-> REJECTED

The only credential accepted is an ``Authorization: Bearer <token>`` header
whose token resolves to a live session in the shared session store. Headers
that claim an identity without proof (for example ``x-wallet-address``)
cause the request to be rejected outright.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from enum import Enum
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from nexura_auth.api.providers import SessionStoreDep
from nexura_auth.core.exceptions import AuthenticationError, AuthServiceError
from nexura_auth.core.security import fingerprint
from nexura_auth.core.settings import settings
from nexura_auth.core.types import Identity

logger = logging.getLogger(__name__)

# HTTP Bearer scheme for session tokens; missing or non-bearer headers yield None
bearer_scheme = HTTPBearer(auto_error=False)

BearerCredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]

_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]{16,512}$")


class AuthState(str, Enum):
    """Lifecycle of a request passing through authentication."""

    UNAUTHENTICATED = "unauthenticated"
    CREDENTIAL_EXTRACTED = "credential_extracted"
    VALIDATING = "validating"
    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"


def extract_bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str:
    """Return the session token carried by parsed bearer credentials.

    Raises:
        AuthenticationError: If no bearer credential was presented or the
            token is malformed.
    """
    if credentials is None:
        raise AuthenticationError("bearer credential missing")

    token = credentials.credentials
    if not _TOKEN_PATTERN.match(token):
        raise AuthenticationError("bearer token is malformed")
    return token


def optional_bearer_token(credentials: BearerCredentialsDep) -> str | None:
    """Return the bearer token if a well-formed one is present, else None."""
    try:
        return extract_bearer_token(credentials)
    except AuthenticationError:
        return None


class SessionAuthenticator:
    """FastAPI dependency resolving the request's bearer token to an `Identity`.

    On success the identity is attached to ``request.state.identity``.
    """

    def __init__(self, assertion_headers: Iterable[str] | None = None) -> None:
        headers = settings.identity_assertion_headers if assertion_headers is None else assertion_headers
        self._assertion_headers = tuple(h.lower() for h in headers)

    def _refuse_asserted_identity(self, request: Request) -> None:
        for header in self._assertion_headers:
            if header in request.headers:
                raise AuthenticationError(f"identity assertion header {header!r} is not accepted")

    def __call__(
        self,
        request: Request,
        sessions: SessionStoreDep,
        credentials: BearerCredentialsDep,
    ) -> Identity:
        state = AuthState.UNAUTHENTICATED
        request.state.auth_state = state
        try:
            self._refuse_asserted_identity(request)
            token = extract_bearer_token(credentials)
            state = request.state.auth_state = AuthState.CREDENTIAL_EXTRACTED

            state = request.state.auth_state = AuthState.VALIDATING
            identity = sessions.validate_session(token)
            if identity is None:
                raise AuthenticationError(f"session {fingerprint(token)} is not valid")
        except AuthServiceError as err:
            logger.info(
                "Request to %s rejected in state %s: %s",
                request.url.path,
                state.value,
                err,
            )
            request.state.auth_state = AuthState.REJECTED
            raise

        request.state.auth_state = AuthState.AUTHENTICATED
        request.state.identity = identity
        return identity


require_identity = SessionAuthenticator()

# Type alias for the authenticated identity dependency
CurrentIdentityDep = Annotated[Identity, Depends(require_identity)]
