"""
Enricher - turns raw per-user totals into displayable leaderboard entries.

For every user that has not opted out, the profile (score, username, image)
and the streak status are fetched concurrently, and all users are joined
before returning. A failed lookup only blanks that user's missing fields.
"""

import asyncio
import logging
from typing import Optional

from focusboard.models.leaderboard import (
    ANONYMOUS_USERNAME,
    PLACEHOLDER_USERNAME,
    LeaderboardEntry,
    RawTotal,
)
from focusboard.models.user import PrivacySetting, StreakStatus, UserMetadata, UserProfile
from focusboard.repositories.base import UserDirectory
from focusboard.services.privacy_resolver import DEFAULT_PRIVACY
from focusboard.services.user_metadata_cache import UserMetadataCache, is_real_username

logger = logging.getLogger(__name__)


class Enricher:
    def __init__(self, directory: UserDirectory, cache: UserMetadataCache):
        self.directory = directory
        self.cache = cache

    async def enrich(
        self,
        raw: dict[str, RawTotal],
        privacy: dict[str, PrivacySetting],
    ) -> list[LeaderboardEntry]:
        """Build unranked entries; opted-out users are dropped before any lookup."""
        visible = [
            (user_id, total, privacy.get(user_id, DEFAULT_PRIVACY))
            for user_id, total in raw.items()
        ]
        visible = [item for item in visible if not item[2].opt_out]

        if not visible:
            return []

        entries = await asyncio.gather(
            *(self._enrich_one(user_id, total, setting) for user_id, total, setting in visible)
        )
        return list(entries)

    async def _enrich_one(
        self,
        user_id: str,
        total: RawTotal,
        setting: PrivacySetting,
    ) -> LeaderboardEntry:
        profile, streak = await self._fetch_details(user_id)

        score = profile.score if profile else None
        image = profile.profile_image_url if profile else None

        if profile is not None and is_real_username(profile.username):
            await self.cache.observe(
                user_id,
                UserMetadata(
                    username=profile.username,
                    score=score,
                    streak_status=streak,
                    profile_image_ref=image,
                ),
            )

        # Privacy comes from the fresh setting, never from the cache
        if setting.anonymize:
            return LeaderboardEntry(
                user_id=user_id,
                display_username=ANONYMOUS_USERNAME,
                minutes=total.minutes,
                score=score,
                streak_status=streak,
                is_anonymous=True,
            )

        return LeaderboardEntry(
            user_id=user_id,
            display_username=self._display_name(user_id, total),
            minutes=total.minutes,
            score=score,
            streak_status=streak,
            is_anonymous=False,
            profile_image_ref=image,
        )

    async def _fetch_details(self, user_id: str) -> tuple[Optional[UserProfile], StreakStatus]:
        """Profile and streak lookups issued together; failures become defaults."""
        profile_result, streak_result = await asyncio.gather(
            self.directory.get_profile(user_id),
            self.directory.get_streak_status(user_id),
            return_exceptions=True,
        )

        profile: Optional[UserProfile] = None
        if isinstance(profile_result, BaseException):
            logger.warning("Profile lookup failed for %s: %s", user_id, profile_result)
        else:
            profile = profile_result

        streak = StreakStatus.NONE
        if isinstance(streak_result, BaseException):
            logger.warning("Streak lookup failed for %s: %s", user_id, streak_result)
        elif streak_result is not None:
            streak = streak_result

        return profile, streak

    def _display_name(self, user_id: str, total: RawTotal) -> str:
        cached = self.cache.get(user_id)
        if cached is not None and is_real_username(cached.username):
            return cached.username
        return total.last_known_username or PLACEHOLDER_USERNAME
