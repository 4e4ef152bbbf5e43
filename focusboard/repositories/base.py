"""
Read interfaces consumed by the leaderboard engine.

Services depend on these protocols, not on Motor, so any store that can
answer the same questions can drive a leaderboard.
"""

from datetime import datetime
from typing import Optional, Protocol

from pydantic import BaseModel
from pymongo.errors import PyMongoError

from focusboard.models.session import SessionRecord
from focusboard.models.user import PrivacySetting, StreakStatus, UserProfile
from focusboard.schemas.location import BoundingBox

# Errors a store raises when it cannot be reached (TimeoutError and
# ConnectionError are OSError subclasses)
UPSTREAM_ERRORS = (PyMongoError, OSError)


class SessionQuery(BaseModel):
    """Filter accepted by SessionStore.query_records."""

    started_after: Optional[datetime] = None  # inclusive
    # True also matches records with no flag; the Aggregator judges those
    was_successful: Optional[bool] = None
    bounding_box: Optional[BoundingBox] = None
    user_ids: Optional[list[str]] = None
    located_only: bool = False


class SessionStore(Protocol):
    async def query_records(self, query: SessionQuery) -> list[SessionRecord]:
        ...


class UserDirectory(Protocol):
    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        ...

    async def get_privacy_setting(self, user_id: str) -> Optional[PrivacySetting]:
        ...

    async def get_streak_status(self, user_id: str) -> StreakStatus:
        ...

    async def list_focus_leaders(self, limit: Optional[int] = None) -> list[UserProfile]:
        ...
