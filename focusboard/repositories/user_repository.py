"""
UserRepository - MongoDB access for the user directory.

Reads profiles (users), privacy preferences (user_settings) and the current
streak (user_streaks). Missing documents are returned as None; network
errors propagate to the caller.
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError
from pymongo import DESCENDING

from focusboard.models.user import PrivacySetting, StreakStatus, UserProfile

logger = logging.getLogger(__name__)

ANONYMOUS_DISPLAY_MODE = "anonymous"


class UserRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["users"]
        self.settings_collection = db["user_settings"]
        self.streaks_collection = db["user_streaks"]

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """Get a user's profile document by ID."""
        doc = await self.collection.find_one({"_id": user_id})
        return UserProfile(**doc) if doc else None

    async def get_privacy_setting(self, user_id: str) -> Optional[PrivacySetting]:
        """Get leaderboard privacy preferences, or None when never set."""
        doc = await self.settings_collection.find_one({"_id": user_id})
        if not doc:
            return None

        return PrivacySetting(
            opt_out=bool(doc.get("regionalOptOut", False)),
            anonymize=doc.get("regionalDisplayMode", "normal") == ANONYMOUS_DISPLAY_MODE,
        )

    async def get_streak_status(self, user_id: str) -> StreakStatus:
        """Get the user's current streak status."""
        doc = await self.streaks_collection.find_one({"_id": user_id})
        if not doc:
            return StreakStatus.NONE
        return StreakStatus.parse(doc.get("streakStatus"))

    async def list_focus_leaders(self, limit: Optional[int] = None) -> list[UserProfile]:
        """
        Users with focus time, ordered by the cumulative totalFocusTime counter.

        The counter is maintained by the directory itself and may lag the
        session log slightly. Documents that do not parse are skipped.
        """
        cursor = self.collection.find(
            {"totalFocusTime": {"$gt": 0}}
        ).sort("totalFocusTime", DESCENDING)

        if limit:
            cursor = cursor.limit(limit)

        docs = await cursor.to_list(length=limit)

        profiles = []
        for doc in docs:
            try:
                profiles.append(UserProfile(**doc))
            except ValidationError:
                logger.debug("Skipping malformed user document %s", doc.get("_id"))
        return profiles
