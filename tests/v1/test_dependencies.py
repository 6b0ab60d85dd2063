# tests/v1/test_dependencies.py
"""Tests for API dependencies module."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi.security import HTTPAuthorizationCredentials
from starlette.datastructures import Headers

from nexura_auth.api.dependencies import (
    AuthState,
    SessionAuthenticator,
    extract_bearer_token,
    optional_bearer_token,
)
from nexura_auth.core.exceptions import AuthenticationError, StorageUnavailableError
from nexura_auth.core.types import Identity

TOKEN = "abcDEF123_-" * 4


def _request(headers: dict[str, str]) -> SimpleNamespace:
    """Minimal stand-in for a Starlette request."""
    return SimpleNamespace(
        headers=Headers(headers),
        state=SimpleNamespace(),
        url=SimpleNamespace(path="/api/me"),
    )


def _bearer(token: str = TOKEN) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestExtractBearerToken:
    """Test the token-shape check on parsed bearer credentials."""

    def test_accepts_well_formed_token(self):
        assert extract_bearer_token(_bearer()) == TOKEN

    @pytest.mark.parametrize(
        "token",
        [
            "",
            f"{TOKEN} extra",
            "short",
            "has.dots.in.it.aaaaaaaa",
            "a" * 513,
        ],
    )
    def test_rejects_malformed_tokens(self, token):
        with pytest.raises(AuthenticationError):
            extract_bearer_token(_bearer(token))

    def test_rejects_missing_credentials(self):
        with pytest.raises(AuthenticationError):
            extract_bearer_token(None)

    def test_optional_token_is_none_when_absent_or_malformed(self):
        assert optional_bearer_token(None) is None
        assert optional_bearer_token(_bearer("short")) is None
        assert optional_bearer_token(_bearer()) == TOKEN


class TestBearerScheme:
    """Test that the Authorization header is parsed by FastAPI's HTTPBearer."""

    def test_openapi_declares_bearer_security(self, client):
        schemes = client.get("/openapi.json").json()["components"]["securitySchemes"]
        assert schemes["HTTPBearer"] == {"type": "http", "scheme": "bearer"}

    @pytest.mark.parametrize(
        "value",
        ["", "Bearer", TOKEN, f"Basic {TOKEN}", f"Token {TOKEN}", f"Bearer {TOKEN} extra"],
    )
    def test_non_bearer_headers_are_unauthorized(self, client, value):
        r = client.get("/api/me", headers={"Authorization": value})
        assert r.status_code == 401
        assert r.json() == {"error": "Authentication failed"}


class TestSessionAuthenticator:
    """Test the request authentication state machine."""

    def _sessions(self, identity=None):
        sessions = MagicMock()
        sessions.validate_session.return_value = identity
        return sessions

    def test_valid_session_authenticates(self):
        identity = Identity(address="0x" + "ab" * 20, user_id="user-1")
        sessions = self._sessions(identity)
        request = _request({"Authorization": f"Bearer {TOKEN}"})

        result = SessionAuthenticator(assertion_headers=[])(request, sessions, _bearer())

        assert result == identity
        assert request.state.identity == identity
        assert request.state.auth_state is AuthState.AUTHENTICATED
        sessions.validate_session.assert_called_once_with(TOKEN)

    def test_invalid_session_is_rejected(self):
        request = _request({"Authorization": f"Bearer {TOKEN}"})

        with pytest.raises(AuthenticationError):
            SessionAuthenticator(assertion_headers=[])(request, self._sessions(None), _bearer())
        assert request.state.auth_state is AuthState.REJECTED
        assert not hasattr(request.state, "identity")

    def test_missing_header_never_reaches_store(self):
        sessions = self._sessions()
        request = _request({})

        with pytest.raises(AuthenticationError):
            SessionAuthenticator(assertion_headers=[])(request, sessions, None)
        sessions.validate_session.assert_not_called()
        assert request.state.auth_state is AuthState.REJECTED

    def test_identity_assertion_header_is_refused(self):
        identity = Identity(address="0x" + "ab" * 20, user_id="user-1")
        sessions = self._sessions(identity)
        request = _request(
            {"Authorization": f"Bearer {TOKEN}", "X-Wallet-Address": "0x" + "ab" * 20}
        )

        with pytest.raises(AuthenticationError):
            SessionAuthenticator(assertion_headers=["x-wallet-address"])(request, sessions, _bearer())
        sessions.validate_session.assert_not_called()

    def test_storage_failure_propagates(self):
        sessions = MagicMock()
        sessions.validate_session.side_effect = StorageUnavailableError("session lookup")
        request = _request({"Authorization": f"Bearer {TOKEN}"})

        with pytest.raises(StorageUnavailableError):
            SessionAuthenticator(assertion_headers=[])(request, sessions, _bearer())
        assert request.state.auth_state is AuthState.REJECTED

