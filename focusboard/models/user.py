from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class StreakStatus(str, Enum):
    NONE = "none"
    ORANGE_FLAME = "orangeFlame"
    RED_FLAME = "redFlame"

    @classmethod
    def parse(cls, value: Optional[str]) -> "StreakStatus":
        """Valores desconocidos o ausentes cuentan como sin racha"""
        try:
            return cls(value)
        except ValueError:
            return cls.NONE


class UserProfile(BaseModel):
    """Documento del usuario en el directorio"""

    id: str = Field(..., alias="_id")
    username: Optional[str] = None
    score: Optional[float] = None  # 0 - 300
    total_focus_time: int = Field(0, alias="totalFocusTime")
    profile_image_url: Optional[str] = Field(None, alias="profileImageURL")

    class Config:
        populate_by_name = True


class PrivacySetting(BaseModel):
    """Preferencias de privacidad para leaderboards"""

    opt_out: bool = False  # excluido de todos los leaderboards
    anonymize: bool = False  # aparece como "Anonymous" pero sigue rankeado

    class Config:
        frozen = True


class UserMetadata(BaseModel):
    """Vista cacheada de un usuario (sin expiración por tiempo)"""

    username: str
    score: Optional[float] = None
    streak_status: StreakStatus = StreakStatus.NONE
    profile_image_ref: Optional[str] = None

    class Config:
        frozen = True
