"""Wiring of repositories and services for request handlers."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

import redis
from fastapi import Depends
from sqlalchemy.orm import Session, sessionmaker

from nexura_auth.core.settings import settings
from nexura_auth.db.session import get_session_factory
from nexura_auth.repositories import (
    ChallengeRepository,
    RedisChallengeRepository,
    SessionRepository,
    SqlChallengeRepository,
    UserRepository,
)
from nexura_auth.services import ChallengeIssuer, SessionStore, SignatureVerifier, WalletAuthService

SessionFactoryDep = Annotated[sessionmaker[Session], Depends(get_session_factory)]


@lru_cache(maxsize=1)
def get_redis_client() -> redis.Redis:
    """Return the process-wide Redis client used by the Redis challenge backend."""
    return redis.from_url(settings.redis_url)  # type: ignore[no-untyped-call]


def build_challenge_repository(session_factory: sessionmaker[Session]) -> ChallengeRepository:
    """Return the challenge repository selected by `CHALLENGE_BACKEND`."""
    backend = settings.challenge_backend.strip().lower()
    if backend == "redis":
        return RedisChallengeRepository(get_redis_client())
    if backend == "database":
        return SqlChallengeRepository(session_factory)
    raise ValueError(f"Unknown CHALLENGE_BACKEND: {settings.challenge_backend!r}")


def get_challenge_issuer(session_factory: SessionFactoryDep) -> ChallengeIssuer:
    return ChallengeIssuer(build_challenge_repository(session_factory))


def get_session_store(session_factory: SessionFactoryDep) -> SessionStore:
    return SessionStore(SessionRepository(session_factory))


def get_wallet_auth_service(
    session_factory: SessionFactoryDep,
    issuer: Annotated[ChallengeIssuer, Depends(get_challenge_issuer)],
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> WalletAuthService:
    return WalletAuthService(
        issuer=issuer,
        verifier=SignatureVerifier(),
        sessions=sessions,
        users=UserRepository(session_factory),
    )


ChallengeIssuerDep = Annotated[ChallengeIssuer, Depends(get_challenge_issuer)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
WalletAuthServiceDep = Annotated[WalletAuthService, Depends(get_wallet_auth_service)]
