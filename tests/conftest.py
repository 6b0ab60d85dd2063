# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CLEANUP_INTERVAL_SECONDS", "0")

from nexura_auth.db.session import Base, get_session_factory
from nexura_auth.main import app as fastapi_app
from nexura_auth.repositories import SessionRepository, SqlChallengeRepository, UserRepository
from nexura_auth.services import ChallengeIssuer, SessionStore
from tests.helpers import FakeClock

TEST_DB_URL = "sqlite://"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> Iterator[sessionmaker[Session]]:
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    try:
        yield factory
    finally:
        # Ensure each test sees a clean database.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_factory(
    app: FastAPI, session_factory: sessionmaker[Session]
) -> Iterator[None]:
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_session_factory, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def challenge_repo(session_factory: sessionmaker[Session]) -> SqlChallengeRepository:
    return SqlChallengeRepository(session_factory)


@pytest.fixture()
def issuer(challenge_repo: SqlChallengeRepository, clock: FakeClock) -> ChallengeIssuer:
    return ChallengeIssuer(challenge_repo, ttl_seconds=300, clock=clock)


@pytest.fixture()
def session_repo(session_factory: sessionmaker[Session]) -> SessionRepository:
    return SessionRepository(session_factory)


@pytest.fixture()
def session_store(session_repo: SessionRepository, clock: FakeClock) -> SessionStore:
    return SessionStore(session_repo, ttl_seconds=3600, clock=clock)


@pytest.fixture()
def user_repo(session_factory: sessionmaker[Session]) -> UserRepository:
    return UserRepository(session_factory)
