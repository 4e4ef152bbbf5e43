"""
Ranker - orders enriched entries and applies the cap.
"""

from typing import Iterable, Optional

from focusboard.models.leaderboard import LeaderboardEntry

DEFAULT_CAP = 10


def rank(
    entries: Iterable[LeaderboardEntry],
    cap: Optional[int] = DEFAULT_CAP,
    label: str = "",
) -> list[LeaderboardEntry]:
    """
    Sort by minutes (descending), breaking ties by user_id (ascending),
    then truncate to `cap`. Truncation always happens after sorting.

    Each returned entry gets its 1-based rank and a synthetic id built from
    `label` and the rank. cap=None keeps every entry.
    """
    ordered = sorted(entries, key=lambda e: (-e.minutes, e.user_id))

    if cap is not None:
        ordered = ordered[:max(cap, 0)]

    prefix = f"{label}-" if label else ""
    return [
        entry.model_copy(update={"rank": position, "id": f"{prefix}{position}"})
        for position, entry in enumerate(ordered, start=1)
    ]
