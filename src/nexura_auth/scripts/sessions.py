"""Administrative maintenance for challenges and sessions.

Usage:
    python -m nexura_auth.scripts.sessions cleanup
    python -m nexura_auth.scripts.sessions revoke --token <token>
    python -m nexura_auth.scripts.sessions revoke-address --address 0x...

Run `cleanup` from cron when the in-process cleanup worker is disabled.
"""
from __future__ import annotations

import argparse
import sys

from nexura_auth.api.providers import build_challenge_repository
from nexura_auth.core.exceptions import StorageUnavailableError
from nexura_auth.core.logging import configure_logging
from nexura_auth.core.settings import settings
from nexura_auth.db.session import SessionLocal
from nexura_auth.repositories import SessionRepository
from nexura_auth.services import SessionStore, purge_expired
from nexura_auth.services.signing import normalize_address


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage wallet login challenges and sessions")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("cleanup", help="Delete expired challenges and sessions")

    revoke = commands.add_parser("revoke", help="Revoke a single session token")
    revoke.add_argument("--token", required=True, help="Bearer token to revoke")

    revoke_address = commands.add_parser(
        "revoke-address", help="Revoke every live session of a wallet address"
    )
    revoke_address.add_argument("--address", required=True, help="0x-prefixed wallet address")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(settings.log_level)
    sessions = SessionStore(SessionRepository(SessionLocal))

    try:
        if args.command == "cleanup":
            challenges_removed, sessions_removed = purge_expired(
                build_challenge_repository(SessionLocal), sessions
            )
            print(f"[sessions] purged {challenges_removed} challenge(s), {sessions_removed} session(s)")
        elif args.command == "revoke":
            sessions.revoke_session(args.token)
            print("[sessions] token revoked")
        else:
            address = normalize_address(args.address)
            if address is None:
                print(f"[sessions] ERROR: malformed address {args.address!r}", file=sys.stderr)
                return 2
            count = sessions.revoke_address(address)
            print(f"[sessions] revoked {count} session(s) for {address}")
    except StorageUnavailableError as exc:
        print(f"[sessions] ERROR: storage unavailable ({exc})", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
