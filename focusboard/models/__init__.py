from .session import SessionRecord
from .user import PrivacySetting, StreakStatus, UserMetadata, UserProfile
from .leaderboard import (
    LeaderboardEntry,
    LeaderboardResult,
    LeaderboardVariant,
    RawTotal,
    TimeWindow,
)

__all__ = [
    "SessionRecord",
    "PrivacySetting",
    "StreakStatus",
    "UserMetadata",
    "UserProfile",
    "LeaderboardEntry",
    "LeaderboardResult",
    "LeaderboardVariant",
    "RawTotal",
    "TimeWindow",
]
