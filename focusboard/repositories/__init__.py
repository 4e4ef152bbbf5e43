from .base import SessionQuery, SessionStore, UserDirectory
from .session_repository import SessionRepository
from .user_repository import UserRepository

__all__ = [
    "SessionQuery",
    "SessionStore",
    "UserDirectory",
    "SessionRepository",
    "UserRepository",
]
