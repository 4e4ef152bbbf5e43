from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel

from focusboard.models.user import StreakStatus


ANONYMOUS_USERNAME = "Anonymous"
PLACEHOLDER_USERNAME = "User"


class TimeWindow(str, Enum):
    ALL_TIME = "all_time"
    CURRENT_WEEK = "current_week"


class LeaderboardVariant(str, Enum):
    GLOBAL_WEEKLY = "global_weekly"
    GLOBAL_ALL_TIME = "global_all_time"
    REGIONAL_WEEKLY = "regional_weekly"
    REGIONAL_ALL_TIME = "regional_all_time"

    @property
    def is_regional(self) -> bool:
        return self in (LeaderboardVariant.REGIONAL_WEEKLY, LeaderboardVariant.REGIONAL_ALL_TIME)

    @property
    def window(self) -> TimeWindow:
        if self in (LeaderboardVariant.GLOBAL_WEEKLY, LeaderboardVariant.REGIONAL_WEEKLY):
            return TimeWindow.CURRENT_WEEK
        return TimeWindow.ALL_TIME

    @property
    def is_weekly(self) -> bool:
        return self.window is TimeWindow.CURRENT_WEEK


class RawTotal(BaseModel):
    """Total agregado por usuario antes de enriquecer"""

    minutes: int = 0
    last_known_username: Optional[str] = None


class LeaderboardEntry(BaseModel):
    """Entrada en una tabla de clasificación (se recalcula en cada query)"""

    id: str = ""  # sintético, no identifica al usuario
    rank: Optional[int] = None

    user_id: str
    display_username: str
    minutes: int

    score: Optional[float] = None
    streak_status: StreakStatus = StreakStatus.NONE
    is_anonymous: bool = False
    profile_image_ref: Optional[str] = None

    @property
    def is_interactive(self) -> bool:
        # Las entradas anónimas no permiten abrir el perfil
        return not self.is_anonymous

    class Config:
        populate_by_name = True


class LeaderboardResult(BaseModel):
    """Resultado de una query: entradas ordenadas + info de la región"""

    variant: LeaderboardVariant
    entries: list[LeaderboardEntry] = []

    region_label: Optional[str] = None
    region_unknown: bool = False

    generated_at: datetime

    @property
    def is_empty(self) -> bool:
        return not self.entries
