"""
Shared test data and in-memory doubles for the store interfaces.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Optional

from focusboard.models.session import SessionRecord
from focusboard.models.user import PrivacySetting, StreakStatus, UserProfile
from focusboard.repositories.base import SessionQuery
from focusboard.schemas.location import GeoPoint
from focusboard.services.geo_scope import METERS_PER_MILE

# Wednesday; the current week starts Monday 2026-10-19 00:00 UTC
NOW = datetime(2026, 10, 21, 15, 0, tzinfo=timezone.utc)
WEEK_START = datetime(2026, 10, 19, tzinfo=timezone.utc)

# San Francisco
REFERENCE = GeoPoint(latitude=37.7749, longitude=-122.4194)
METERS_PER_DEGREE_LAT = 111_195.08


def north_of(point: GeoPoint, miles: float) -> GeoPoint:
    """A point `miles` due north of `point` (exact along a meridian)."""
    delta = miles * METERS_PER_MILE / METERS_PER_DEGREE_LAT
    return GeoPoint(latitude=point.latitude + delta, longitude=point.longitude)


class FakeSessionStore:
    """In-memory SessionStore honouring the cheap parts of SessionQuery."""

    def __init__(self, records: Optional[list[SessionRecord]] = None):
        self.records = list(records or [])
        self.queries: list[SessionQuery] = []
        self.unavailable = False

    def add(self, *records: SessionRecord):
        self.records.extend(records)

    async def query_records(self, query: SessionQuery) -> list[SessionRecord]:
        self.queries.append(query)
        if self.unavailable:
            raise ConnectionError("session store unreachable")

        result = []
        for record in self.records:
            if query.user_ids is not None and record.user_id not in query.user_ids:
                continue
            if query.located_only and record.location is None:
                continue
            result.append(record)
        return result


class FakeUserDirectory:
    """In-memory UserDirectory with switchable per-user failures."""

    def __init__(self, delay: float = 0.0):
        self.profiles: dict[str, UserProfile] = {}
        self.privacy: dict[str, PrivacySetting] = {}
        self.streaks: dict[str, StreakStatus] = {}

        self.failing_profiles: set[str] = set()
        self.failing_privacy: set[str] = set()
        self.failing_streaks: set[str] = set()
        self.unavailable = False

        self.delay = delay
        self.calls: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def add_user(
        self,
        user_id: str,
        username: Optional[str] = None,
        score: Optional[float] = None,
        total_focus_time: int = 0,
        streak: Optional[StreakStatus] = None,
        privacy: Optional[PrivacySetting] = None,
        profile_image_url: Optional[str] = None,
    ):
        self.profiles[user_id] = UserProfile(
            _id=user_id,
            username=username,
            score=score,
            totalFocusTime=total_focus_time,
            profileImageURL=profile_image_url,
        )
        if streak is not None:
            self.streaks[user_id] = streak
        if privacy is not None:
            self.privacy[user_id] = privacy

    async def _call(self, kind: str, user_id: str, failing: set[str]):
        self.calls.append((kind, user_id))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.unavailable:
                raise ConnectionError("user directory unreachable")
            if user_id in failing:
                raise TimeoutError(f"{kind} lookup timed out for {user_id}")
        finally:
            self.in_flight -= 1

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        await self._call("profile", user_id, self.failing_profiles)
        return self.profiles.get(user_id)

    async def get_privacy_setting(self, user_id: str) -> Optional[PrivacySetting]:
        await self._call("privacy", user_id, self.failing_privacy)
        return self.privacy.get(user_id)

    async def get_streak_status(self, user_id: str) -> StreakStatus:
        await self._call("streak", user_id, self.failing_streaks)
        return self.streaks.get(user_id, StreakStatus.NONE)

    async def list_focus_leaders(self, limit: Optional[int] = None) -> list[UserProfile]:
        if self.unavailable:
            raise ConnectionError("user directory unreachable")
        leaders = sorted(
            (p for p in self.profiles.values() if p.total_focus_time > 0),
            key=lambda p: p.total_focus_time,
            reverse=True,
        )
        return leaders[:limit] if limit else leaders

    def calls_for(self, user_id: str) -> list[str]:
        return [kind for kind, uid in self.calls if uid == user_id]


def make_session(
    user_id: Optional[str] = "user1",
    minutes: Optional[int] = 30,
    start: datetime = NOW - timedelta(hours=2),
    successful: Optional[bool] = True,
    username: Optional[str] = None,
    location: Optional[GeoPoint] = None,
    target: Optional[int] = None,
    include_in_leaderboards: bool = True,
) -> SessionRecord:
    return SessionRecord(
        user_id=user_id,
        username=username,
        start_time=start,
        actual_duration_minutes=minutes,
        target_duration_minutes=target,
        was_successful=successful,
        location=location,
        include_in_leaderboards=include_in_leaderboards,
    )


