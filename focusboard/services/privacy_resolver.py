"""
PrivacyResolver - resolves leaderboard privacy preferences for a set of users.
"""

import asyncio
import logging
from typing import Iterable

from focusboard.models.user import PrivacySetting
from focusboard.repositories.base import UPSTREAM_ERRORS, UserDirectory

logger = logging.getLogger(__name__)

DEFAULT_PRIVACY = PrivacySetting()


class DirectoryUnavailableError(Exception):
    """Raised when no privacy lookup reached the user directory."""
    pass


class PrivacyResolver:
    def __init__(self, directory: UserDirectory):
        self.directory = directory

    async def resolve(self, user_ids: Iterable[str]) -> dict[str, PrivacySetting]:
        """
        Fetch settings for every distinct user concurrently.

        Users without a settings document, and users whose lookup failed,
        get the default (not opted out, not anonymous). When every lookup
        failed with a connection error the directory is down, and defaulting
        would reveal opted-out users, so DirectoryUnavailableError is raised.
        """
        unique_ids = list(dict.fromkeys(user_ids))
        if not unique_ids:
            return {}

        results = await asyncio.gather(
            *(self.directory.get_privacy_setting(user_id) for user_id in unique_ids),
            return_exceptions=True,
        )

        if all(isinstance(result, UPSTREAM_ERRORS) for result in results):
            raise DirectoryUnavailableError(
                f"All {len(results)} privacy lookups failed: {results[0]}"
            )

        resolved: dict[str, PrivacySetting] = {}
        for user_id, result in zip(unique_ids, results):
            if isinstance(result, BaseException):
                logger.warning("Privacy lookup failed for %s: %s", user_id, result)
                resolved[user_id] = DEFAULT_PRIVACY
            elif result is None:
                resolved[user_id] = DEFAULT_PRIVACY
            else:
                resolved[user_id] = result

        return resolved
