"""
Aggregator - buckets session records into per-user totals.

Filters run cheapest first: time window, then success (weekly only), then
per-session consent and geo-scope (regional only). Records missing a user id
or a numeric duration are dropped without raising.
"""

import logging
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Callable, Iterable, Optional
from zoneinfo import ZoneInfo

from focusboard.models.leaderboard import RawTotal, TimeWindow
from focusboard.models.session import SessionRecord
from focusboard.models.user import UserProfile
from focusboard.services.geo_scope import GeoScope

logger = logging.getLogger(__name__)

DEFAULT_SUCCESS_RATIO = 0.9

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # Motor returns naive datetimes that are already UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def week_start(now: datetime, tz: tzinfo = timezone.utc) -> datetime:
    """Monday 00:00:00 of the week containing `now` in `tz`, returned in UTC."""
    local = as_utc(now).astimezone(tz)
    monday = (local - timedelta(days=local.weekday())).date()
    start = datetime(monday.year, monday.month, monday.day, tzinfo=tz)
    return start.astimezone(timezone.utc)


def infer_success(record: SessionRecord, threshold: float = DEFAULT_SUCCESS_RATIO) -> bool:
    """
    Success flag with a fallback for records written without one.

    An explicit wasSuccessful always wins. Otherwise the session counts as
    successful when it ran for at least `threshold` of its target duration.
    Records with neither are treated as unsuccessful.
    """
    if record.was_successful is not None:
        return record.was_successful

    target = record.target_duration_minutes
    actual = record.actual_duration_minutes
    if not target or actual is None:
        return False
    return actual >= threshold * target


def _is_usable(record: SessionRecord) -> bool:
    return bool(record.user_id) and isinstance(record.actual_duration_minutes, int)


class Aggregator:
    def __init__(
        self,
        clock: Clock = utcnow,
        week_timezone: tzinfo = timezone.utc,
        success_threshold: float = DEFAULT_SUCCESS_RATIO,
    ):
        self.clock = clock
        self.week_timezone = week_timezone
        self.success_threshold = success_threshold

    @classmethod
    def from_timezone_name(cls, name: str, **kwargs) -> "Aggregator":
        tz = timezone.utc if name.upper() == "UTC" else ZoneInfo(name)
        return cls(week_timezone=tz, **kwargs)

    def window_start(self, window: TimeWindow) -> Optional[datetime]:
        """Lower bound for `window`, recomputed from the clock on every call."""
        if window is TimeWindow.ALL_TIME:
            return None
        return week_start(self.clock(), self.week_timezone)

    def aggregate(
        self,
        records: Iterable[SessionRecord],
        window: TimeWindow,
        geo_scope: Optional[GeoScope] = None,
        since: Optional[datetime] = None,
    ) -> dict[str, RawTotal]:
        """
        Sum actual minutes per user over the records that pass every filter.

        `since` lets a caller reuse the week boundary it already computed for
        the same query; otherwise it is derived from the clock.
        """
        if since is None:
            since = self.window_start(window)
        weekly = window is TimeWindow.CURRENT_WEEK

        totals: dict[str, RawTotal] = {}
        dropped = 0

        for record in records:
            if not _is_usable(record):
                dropped += 1
                continue

            if since is not None:
                if record.start_time is None or as_utc(record.start_time) < since:
                    continue

            if weekly and not infer_success(record, self.success_threshold):
                continue

            if geo_scope is not None:
                if not record.include_in_leaderboards:
                    continue
                if not geo_scope.contains(record.location):
                    continue

            total = totals.get(record.user_id)
            if total is None:
                totals[record.user_id] = RawTotal(
                    minutes=record.actual_duration_minutes,
                    last_known_username=record.username or None,
                )
            else:
                total.minutes += record.actual_duration_minutes
                if record.username:
                    total.last_known_username = total.last_known_username or record.username

        if dropped:
            logger.debug("Dropped %d session records with missing fields", dropped)

        return totals

    def aggregate_counters(
        self,
        profiles: Iterable[UserProfile],
        restrict_to: Optional[set[str]] = None,
    ) -> dict[str, RawTotal]:
        """
        All-time totals from the directory's totalFocusTime counter.

        These reflect the directory's running counter rather than a re-sum of
        the session log, so the two can differ when they were not updated
        together.
        """
        totals: dict[str, RawTotal] = {}

        for profile in profiles:
            if profile.total_focus_time <= 0:
                continue
            if restrict_to is not None and profile.id not in restrict_to:
                continue
            totals[profile.id] = RawTotal(
                minutes=profile.total_focus_time,
                last_known_username=profile.username or None,
            )

        return totals

    def users_in_scope(
        self,
        records: Iterable[SessionRecord],
        geo_scope: GeoScope,
    ) -> set[str]:
        """Users with at least one consented, located session inside the scope."""
        users: set[str] = set()

        for record in records:
            if not record.user_id or record.user_id in users:
                continue
            if not record.include_in_leaderboards:
                continue
            if geo_scope.contains(record.location):
                users.add(record.user_id)

        return users
