"""Wallet signature verification for personal-message (EIP-191) signatures."""
from __future__ import annotations

import logging
import re

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_utils import is_hex_address

logger = logging.getLogger(__name__)

_SIGNATURE_PATTERN = re.compile(r"^(0x)?[0-9a-fA-F]{130}$")  # r || s || v, 65 bytes
MAX_MESSAGE_LENGTH = 2048


def normalize_address(address: str) -> str | None:
    """Return the lower-case form of a well-formed `0x` address, else None."""
    if not isinstance(address, str):
        return None
    candidate = address.strip()
    if not is_hex_address(candidate) or not candidate.startswith(("0x", "0X")):
        return None
    return "0x" + candidate[2:].lower()


class SignatureVerifier:
    """Recovers the signer of a personal message and compares it to a claimed address.

    Verification is pure computation. Every failure yields False; the cause is
    only written to the server log.
    """

    def verify(self, address: str, message: str, signature: str) -> bool:
        """Return True if `signature` over `message` recovers to `address`.

        Args:
            address: Claimed signer address, any letter case.
            message: Exact text that the wallet signed.
            signature: Hex-encoded 65-byte signature, optionally `0x`-prefixed.
        """
        claimed = normalize_address(address)
        if claimed is None:
            logger.info("Signature rejected: malformed address")
            return False
        if not isinstance(message, str) or not message or len(message) > MAX_MESSAGE_LENGTH:
            logger.info("Signature rejected: malformed message for %s", claimed)
            return False
        if not isinstance(signature, str) or not _SIGNATURE_PATTERN.match(signature.strip()):
            logger.info("Signature rejected: malformed signature for %s", claimed)
            return False

        raw = signature.strip()
        signature_bytes = bytes.fromhex(raw[2:] if raw[:2] in ("0x", "0X") else raw)
        if signature_bytes[-1] in (0, 1):
            # Some hardware wallets emit the bare recovery id.
            signature_bytes = signature_bytes[:-1] + bytes([signature_bytes[-1] + 27])
        try:
            recovered = Account.recover_message(encode_defunct(text=message), signature=signature_bytes)
        except Exception as err:  # noqa: BLE001 - any recovery failure is a rejection
            logger.info("Signature rejected: recovery failed for %s (%s)", claimed, type(err).__name__)
            return False

        if recovered.lower() != claimed:
            logger.info("Signature rejected: recovered signer does not match %s", claimed)
            return False
        return True
