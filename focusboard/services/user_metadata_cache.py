"""
UserMetadataCache - process-wide memo of username/score/streak lookups.

Shared by every leaderboard variant. Entries never expire by time; they are
replaced when a new non-empty username is observed or dropped explicitly.
The cache is display data only and is never used for privacy decisions.
"""

import asyncio
from typing import Optional

from focusboard.models.leaderboard import ANONYMOUS_USERNAME, PLACEHOLDER_USERNAME
from focusboard.models.user import UserMetadata


def is_real_username(username: Optional[str]) -> bool:
    return bool(username) and username not in (PLACEHOLDER_USERNAME, ANONYMOUS_USERNAME)


class UserMetadataCache:
    def __init__(self):
        self._entries: dict[str, UserMetadata] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._entries

    def get(self, user_id: str) -> Optional[UserMetadata]:
        return self._entries.get(user_id)

    async def put(self, user_id: str, metadata: UserMetadata) -> None:
        async with self._lock:
            self._entries[user_id] = metadata

    async def observe(self, user_id: str, metadata: UserMetadata) -> bool:
        """
        Write-through from a fresh directory lookup.

        Only a real username is cached. Returns True when the entry changed.
        """
        if not is_real_username(metadata.username):
            return False

        async with self._lock:
            if self._entries.get(user_id) == metadata:
                return False
            self._entries[user_id] = metadata
            return True

    async def invalidate(self, user_id: str) -> None:
        async with self._lock:
            self._entries.pop(user_id, None)

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()
