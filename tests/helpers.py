"""Shared helpers for wallet auth tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount


class FakeClock:
    """Controllable replacement for `utcnow`."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


def new_wallet() -> LocalAccount:
    return Account.create()


def sign(wallet: LocalAccount, message: str) -> str:
    """Return a 0x-prefixed personal-message signature over `message`."""
    signed = Account.sign_message(encode_defunct(text=message), private_key=wallet.key)
    return "0x" + bytes(signed.signature).hex()


def shouting(address: str) -> str:
    """Return `address` with every hex letter upper-cased."""
    return "0x" + address[2:].upper()
