"""Challenge repositories backed by the SQL database or Redis."""

from __future__ import annotations

from datetime import UTC, datetime

import redis
from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from nexura_auth.core.types import Challenge
from nexura_auth.db.time import as_utc
from nexura_auth.models import AuthChallenge
from nexura_auth.repositories.base import storage_errors


def _to_challenge(row: AuthChallenge) -> Challenge:
    return Challenge(
        address=row.address,
        nonce=row.nonce,
        message=row.message,
        issued_at=as_utc(row.issued_at),
        expires_at=as_utc(row.expires_at),
        consumed=row.consumed,
    )


class SqlChallengeRepository:
    """Challenge store using one row per address in `auth_challenge`."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get(self, address: str) -> Challenge | None:
        with storage_errors("challenge lookup"), self._session_factory() as db:
            row = db.get(AuthChallenge, address)
            return _to_challenge(row) if row is not None else None

    def put(self, challenge: Challenge) -> None:
        values = {
            "nonce": challenge.nonce,
            "message": challenge.message,
            "issued_at": challenge.issued_at,
            "expires_at": challenge.expires_at,
            "consumed": False,
        }
        overwrite = (
            update(AuthChallenge)
            .where(AuthChallenge.address == challenge.address)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        with storage_errors("challenge store"), self._session_factory() as db:
            if db.execute(overwrite).rowcount == 0:
                db.add(AuthChallenge(address=challenge.address, **values))
            try:
                db.commit()
            except IntegrityError:
                # A concurrent issue for the same address inserted first; overwrite it.
                db.rollback()
                db.execute(overwrite)
                db.commit()

    def consume(self, address: str, message: str, now: datetime) -> Challenge | None:
        claim = (
            update(AuthChallenge)
            .where(
                AuthChallenge.address == address,
                AuthChallenge.message == message,
                AuthChallenge.consumed.is_(False),
                AuthChallenge.expires_at > now,
            )
            .values(consumed=True)
            .execution_options(synchronize_session=False)
        )
        with storage_errors("challenge consume"), self._session_factory() as db:
            if db.execute(claim).rowcount != 1:
                db.rollback()
                return None
            row = db.get(AuthChallenge, address)
            consumed = _to_challenge(row) if row is not None else None
            db.commit()
            return consumed

    def delete_expired(self, now: datetime) -> int:
        purge = (
            delete(AuthChallenge)
            .where(AuthChallenge.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        with storage_errors("challenge purge"), self._session_factory() as db:
            removed = db.execute(purge).rowcount
            db.commit()
            return removed


# KEYS[1] = challenge key; ARGV[1] = message; ARGV[2] = now (epoch seconds, float)
_CONSUME_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 0 then
  return nil
end
if redis.call('HGET', KEYS[1], 'consumed') ~= '0' then
  return nil
end
if redis.call('HGET', KEYS[1], 'message') ~= ARGV[1] then
  return nil
end
if tonumber(redis.call('HGET', KEYS[1], 'expires_at')) <= tonumber(ARGV[2]) then
  return nil
end
redis.call('HSET', KEYS[1], 'consumed', '1')
return redis.call('HGETALL', KEYS[1])
"""


class RedisChallengeRepository:
    """Challenge store using one Redis hash per address.

    Keys carry a TTL equal to the challenge lifetime so Redis evicts them on
    its own; expiry is still checked inside the consume script.
    """

    key_prefix = "auth:challenge:"

    def __init__(self, client: redis.Redis) -> None:
        self._redis = client
        self._consume = client.register_script(_CONSUME_SCRIPT)

    def _key(self, address: str) -> str:
        return f"{self.key_prefix}{address}"

    @staticmethod
    def _decode(fields: dict) -> Challenge:
        def text(value: bytes | str) -> str:
            return value.decode() if isinstance(value, bytes) else str(value)

        data = {text(k): text(v) for k, v in fields.items()}
        return Challenge(
            address=data["address"],
            nonce=data["nonce"],
            message=data["message"],
            issued_at=datetime.fromtimestamp(float(data["issued_at"]), UTC),
            expires_at=datetime.fromtimestamp(float(data["expires_at"]), UTC),
            consumed=data["consumed"] == "1",
        )

    def get(self, address: str) -> Challenge | None:
        with storage_errors("challenge lookup"):
            fields = self._redis.hgetall(self._key(address))
        return self._decode(fields) if fields else None

    def put(self, challenge: Challenge) -> None:
        key = self._key(challenge.address)
        ttl = max(1, int((challenge.expires_at - challenge.issued_at).total_seconds()) + 1)
        with storage_errors("challenge store"):
            pipe = self._redis.pipeline(transaction=True)
            pipe.delete(key)
            pipe.hset(
                key,
                mapping={
                    "address": challenge.address,
                    "nonce": challenge.nonce,
                    "message": challenge.message,
                    "issued_at": repr(challenge.issued_at.timestamp()),
                    "expires_at": repr(challenge.expires_at.timestamp()),
                    "consumed": "0",
                },
            )
            pipe.expire(key, ttl)
            pipe.execute()

    def consume(self, address: str, message: str, now: datetime) -> Challenge | None:
        with storage_errors("challenge consume"):
            flat = self._consume(keys=[self._key(address)], args=[message, repr(now.timestamp())])
        if not flat:
            return None
        return self._decode(dict(zip(flat[::2], flat[1::2], strict=True)))

    def delete_expired(self, now: datetime) -> int:
        # Redis expires challenge keys through their TTL.
        return 0
