"""Storage repositories for challenges, sessions and wallet users."""

from .base import ChallengeRepository, storage_errors
from .challenge_repo import RedisChallengeRepository, SqlChallengeRepository
from .session_repo import SessionRepository
from .user_repo import UserRepository

__all__ = [
    "ChallengeRepository",
    "RedisChallengeRepository",
    "SessionRepository",
    "SqlChallengeRepository",
    "UserRepository",
    "storage_errors",
]
