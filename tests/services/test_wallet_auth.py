"""Tests for the wallet login flow."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from nexura_auth.core.exceptions import AuthenticationError, ConflictError, InputValidationError
from nexura_auth.repositories import UserRepository
from nexura_auth.services import ChallengeIssuer, SessionStore, SignatureVerifier, WalletAuthService
from tests.helpers import FakeClock, new_wallet, shouting, sign


@pytest.fixture()
def service(
    issuer: ChallengeIssuer, session_store: SessionStore, user_repo: UserRepository, clock: FakeClock
) -> WalletAuthService:
    return WalletAuthService(issuer, SignatureVerifier(), session_store, user_repo, clock=clock)


def test_authenticate_issues_session(
    service: WalletAuthService, issuer: ChallengeIssuer, session_store: SessionStore
) -> None:
    wallet = new_wallet()
    message = issuer.issue_challenge(wallet.address)

    issued = service.authenticate(shouting(wallet.address), message, sign(wallet, message))

    assert issued.address == wallet.address.lower()
    identity = session_store.validate_session(issued.token)
    assert identity is not None
    assert identity.user_id == issued.user_id


def test_malformed_address_raises_input_error(service: WalletAuthService) -> None:
    with pytest.raises(InputValidationError):
        service.authenticate("0x12", "message", "0x00")


def test_bad_signature_leaves_challenge_pending(
    service: WalletAuthService, issuer: ChallengeIssuer
) -> None:
    wallet, attacker = new_wallet(), new_wallet()
    message = issuer.issue_challenge(wallet.address)

    with pytest.raises(AuthenticationError):
        service.authenticate(wallet.address, message, sign(attacker, message))
    assert issuer.consume_challenge(wallet.address, message) is not None


def test_replay_raises_conflict(service: WalletAuthService, issuer: ChallengeIssuer) -> None:
    wallet = new_wallet()
    message = issuer.issue_challenge(wallet.address)
    signature = sign(wallet, message)

    service.authenticate(wallet.address, message, signature)
    with pytest.raises(ConflictError):
        service.authenticate(wallet.address, message, signature)


def test_expired_challenge_raises_conflict(
    service: WalletAuthService, issuer: ChallengeIssuer, clock: FakeClock
) -> None:
    wallet = new_wallet()
    message = issuer.issue_challenge(wallet.address)
    clock.advance(301)

    with pytest.raises(ConflictError):
        service.authenticate(wallet.address, message, sign(wallet, message))


def test_signature_is_checked_before_challenge() -> None:
    issuer = MagicMock()
    verifier = MagicMock()
    verifier.verify.return_value = False
    service = WalletAuthService(issuer, verifier, MagicMock(), MagicMock())

    with pytest.raises(AuthenticationError):
        service.authenticate("0x" + "ab" * 20, "message", "0x00")
    issuer.consume_challenge.assert_not_called()


def test_first_login_creates_user_once(
    service: WalletAuthService,
    issuer: ChallengeIssuer,
    user_repo: UserRepository,
    clock: FakeClock,
) -> None:
    wallet = new_wallet()
    assert user_repo.find_user_id(wallet.address.lower()) is None

    ids = []
    for _ in range(2):
        message = issuer.issue_challenge(wallet.address)
        ids.append(service.authenticate(wallet.address, message, sign(wallet, message)).user_id)
        clock.advance(1)

    assert ids[0] == ids[1]
    assert user_repo.find_user_id(wallet.address.lower()) == ids[0]
