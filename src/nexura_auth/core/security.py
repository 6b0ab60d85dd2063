"""Token, nonce and digest helpers."""
from __future__ import annotations

import hashlib
import secrets

NONCE_NUM_BYTES = 16
SESSION_TOKEN_NUM_BYTES = 32


def generate_nonce(num_bytes: int = NONCE_NUM_BYTES) -> str:
    """Return a hex nonce with `num_bytes` of entropy."""
    return secrets.token_hex(num_bytes)


def generate_session_token(num_bytes: int = SESSION_TOKEN_NUM_BYTES) -> str:
    """Return an opaque URL-safe bearer token with `num_bytes` of entropy."""
    return secrets.token_urlsafe(num_bytes)


def hash_token(token: str) -> str:
    """Return the SHA-256 hex digest under which a session token is stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def fingerprint(secret: str) -> str:
    """Return a short tag that lets logs correlate a secret without revealing it."""
    return hash_token(secret)[:12]
