from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from focusboard.schemas.location import GeoPoint


class SessionRecord(BaseModel):
    """Sesión de foco completada (solo lectura para el motor de leaderboards)"""

    # Opcionales a propósito: los documentos incompletos se descartan en el Aggregator
    user_id: Optional[str] = Field(None, alias="userId")
    username: Optional[str] = None  # nombre al momento de grabar la sesión

    start_time: Optional[datetime] = Field(None, alias="startTime")
    actual_duration_minutes: Optional[int] = Field(None, alias="actualDuration")
    target_duration_minutes: Optional[int] = Field(None, alias="duration")

    was_successful: Optional[bool] = Field(None, alias="wasSuccessful")

    location: Optional[GeoPoint] = None
    participant_ids: Optional[list[str]] = Field(None, alias="participantIds")

    include_in_leaderboards: bool = Field(True, alias="includeInLeaderboards")

    class Config:
        populate_by_name = True
        frozen = True
