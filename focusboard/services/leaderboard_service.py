"""
LeaderboardService - builds every leaderboard variant through one pipeline.

    candidates -> Aggregator -> PrivacyResolver -> Enricher -> Ranker

Weekly variants re-sum session records; all-time variants read the user
directory's cumulative focus counters. Each query keeps its own accumulators,
so concurrent queries only share the UserMetadataCache.
"""

import logging
from typing import Iterable, Optional, Union

from motor.motor_asyncio import AsyncIOMotorDatabase

from focusboard.core.config import Settings, get_settings
from focusboard.models.leaderboard import LeaderboardResult, LeaderboardVariant, RawTotal
from focusboard.models.session import SessionRecord
from focusboard.models.user import PrivacySetting, UserProfile
from focusboard.repositories.base import (
    UPSTREAM_ERRORS,
    SessionQuery,
    SessionStore,
    UserDirectory,
)
from focusboard.repositories.session_repository import SessionRepository
from focusboard.repositories.user_repository import UserRepository
from focusboard.schemas.location import GeoPoint
from focusboard.services.aggregator import Aggregator, Clock, utcnow
from focusboard.services.enricher import Enricher
from focusboard.services.geo_scope import GeoScope
from focusboard.services.privacy_resolver import DirectoryUnavailableError, PrivacyResolver
from focusboard.services.ranker import rank
from focusboard.services.user_metadata_cache import UserMetadataCache

logger = logging.getLogger(__name__)


class LeaderboardServiceError(Exception):
    """Base exception for leaderboard service errors."""
    pass


class UnknownVariantError(LeaderboardServiceError):
    """Raised when a variant name does not match any leaderboard."""
    pass


class UpstreamUnavailableError(LeaderboardServiceError):
    """Raised when the session store or user directory cannot be reached."""

    def __init__(self, message: str, retryable: bool = True):
        super().__init__(message)
        self.retryable = retryable


class LeaderboardService:
    def __init__(
        self,
        session_store: SessionStore,
        user_directory: UserDirectory,
        cache: Optional[UserMetadataCache] = None,
        settings: Optional[Settings] = None,
        clock: Clock = utcnow,
    ):
        self.settings = settings or get_settings()
        self.session_store = session_store
        self.user_directory = user_directory
        self.cache = cache if cache is not None else UserMetadataCache()
        self.clock = clock

        self.aggregator = Aggregator.from_timezone_name(
            self.settings.week_timezone,
            clock=clock,
            success_threshold=self.settings.success_ratio_threshold,
        )
        self.privacy_resolver = PrivacyResolver(user_directory)
        self.enricher = Enricher(user_directory, self.cache)

    @classmethod
    def from_database(
        cls,
        db: AsyncIOMotorDatabase,
        cache: Optional[UserMetadataCache] = None,
        settings: Optional[Settings] = None,
    ) -> "LeaderboardService":
        return cls(SessionRepository(db), UserRepository(db), cache=cache, settings=settings)

    async def query(
        self,
        variant: Union[LeaderboardVariant, str],
        reference_location: Optional[GeoPoint] = None,
        region_name: Optional[str] = None,
    ) -> LeaderboardResult:
        """
        Get the capped, ordered leaderboard for `variant`.

        Regional variants without a reference location fall back to the
        unfiltered set and flag the region as unknown. An empty entry list
        means there is no data yet.
        """
        return await self._build(
            variant,
            reference_location,
            region_name,
            cap=self.settings.leaderboard_cap,
        )

    async def get_user_rank(
        self,
        variant: Union[LeaderboardVariant, str],
        user_id: str,
        reference_location: Optional[GeoPoint] = None,
    ) -> Optional[dict]:
        """
        Get a user's position in the uncapped ranking of `variant`.

        Returns dict with rank and entry, or None when the user is not ranked
        (no minutes in scope, or opted out).
        """
        result = await self._build(variant, reference_location, None, cap=None)

        for entry in result.entries:
            if entry.user_id == user_id:
                return {"rank": entry.rank, "entry": entry}

        return None

    # ============================================
    # Pipeline
    # ============================================

    async def _build(
        self,
        variant: Union[LeaderboardVariant, str],
        reference_location: Optional[GeoPoint],
        region_name: Optional[str],
        cap: Optional[int],
    ) -> LeaderboardResult:
        variant = parse_variant(variant)

        geo_scope: Optional[GeoScope] = None
        region_label: Optional[str] = None
        region_unknown = False

        if variant.is_regional:
            geo_scope = GeoScope.for_reference(
                reference_location, self.settings.regional_radius_meters
            )
            if geo_scope.is_fallback:
                region_unknown = True
                region_label = self.settings.region_unknown_label
            else:
                region_label = region_name or self.settings.region_unknown_label

        if variant.is_weekly:
            raw = await self._collect_weekly(variant, geo_scope)
        else:
            raw = await self._collect_all_time(geo_scope)

        privacy = await self._resolve_privacy(raw.keys())
        entries = await self.enricher.enrich(raw, privacy)
        ranked = rank(entries, cap=cap, label=variant.value)

        logger.info(
            "Leaderboard %s: %d candidates, %d entries%s",
            variant.value,
            len(raw),
            len(ranked),
            " (no location fallback)" if region_unknown else "",
        )

        return LeaderboardResult(
            variant=variant,
            entries=ranked,
            region_label=region_label,
            region_unknown=region_unknown,
            generated_at=self.clock(),
        )

    async def _collect_weekly(
        self,
        variant: LeaderboardVariant,
        geo_scope: Optional[GeoScope],
    ) -> dict[str, RawTotal]:
        since = self.aggregator.window_start(variant.window)

        records = await self._fetch_records(SessionQuery(
            started_after=since,
            was_successful=True,
            bounding_box=geo_scope.bounding_box() if geo_scope else None,
        ))

        return self.aggregator.aggregate(records, variant.window, geo_scope, since=since)

    async def _collect_all_time(self, geo_scope: Optional[GeoScope]) -> dict[str, RawTotal]:
        filtered = geo_scope is not None and not geo_scope.is_fallback

        # Regional boards need every user with focus time, not just the global top
        limit = None if geo_scope is not None else self.settings.all_time_candidate_limit
        profiles = await self._fetch_leaders(limit)

        if not filtered or not profiles:
            return self.aggregator.aggregate_counters(profiles)

        records = await self._fetch_records(SessionQuery(
            user_ids=[profile.id for profile in profiles],
            bounding_box=geo_scope.bounding_box(),
            located_only=True,
        ))
        in_region = self.aggregator.users_in_scope(records, geo_scope)

        return self.aggregator.aggregate_counters(profiles, restrict_to=in_region)

    # ============================================
    # Upstream access
    # ============================================

    async def _fetch_records(self, query: SessionQuery) -> list[SessionRecord]:
        try:
            return await self.session_store.query_records(query)
        except UPSTREAM_ERRORS as e:
            logger.error("Session store unavailable: %s", e)
            raise UpstreamUnavailableError("Session store unavailable") from e

    async def _fetch_leaders(self, limit: Optional[int]) -> list[UserProfile]:
        try:
            return await self.user_directory.list_focus_leaders(limit)
        except UPSTREAM_ERRORS as e:
            logger.error("User directory unavailable: %s", e)
            raise UpstreamUnavailableError("User directory unavailable") from e

    async def _resolve_privacy(self, user_ids: Iterable[str]) -> dict[str, PrivacySetting]:
        try:
            return await self.privacy_resolver.resolve(user_ids)
        except DirectoryUnavailableError as e:
            logger.error("User directory unavailable: %s", e)
            raise UpstreamUnavailableError("User directory unavailable") from e


def parse_variant(value: Union[LeaderboardVariant, str]) -> LeaderboardVariant:
    if isinstance(value, LeaderboardVariant):
        return value
    try:
        return LeaderboardVariant(value)
    except ValueError:
        raise UnknownVariantError(f"Unknown leaderboard variant: {value}")
