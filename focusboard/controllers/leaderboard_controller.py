"""
Controlador de leaderboards - Endpoints de clasificación

Las tablas se calculan en cada request a partir de las sesiones y del
directorio de usuarios. La capa de presentación las renderiza tal cual.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from focusboard.core.dependencies import Leaderboards
from focusboard.models.leaderboard import LeaderboardEntry
from focusboard.schemas.location import GeoPoint
from focusboard.services.leaderboard_service import (
    UnknownVariantError,
    UpstreamUnavailableError,
)


router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


class LeaderboardEntryResponse(BaseModel):
    """Entrada del leaderboard lista para mostrar."""
    id: str
    rank: int
    user_id: str
    username: str
    minutes: int
    score: Optional[float] = None
    streak_status: str
    is_anonymous: bool
    interactive: bool
    profile_image_ref: Optional[str] = None


class LeaderboardResponse(BaseModel):
    """Leaderboard con las entradas y la info de la región (si aplica)."""
    variant: str
    entries: list[LeaderboardEntryResponse]
    region_label: Optional[str] = None
    region_unknown: bool = False
    generated_at: datetime


class UserRankResponse(BaseModel):
    rank: Optional[int] = None
    entry: Optional[LeaderboardEntryResponse] = None


def _to_response(entry: LeaderboardEntry) -> LeaderboardEntryResponse:
    return LeaderboardEntryResponse(
        id=entry.id,
        rank=entry.rank,
        user_id=entry.user_id,
        username=entry.display_username,
        minutes=entry.minutes,
        score=entry.score,
        streak_status=entry.streak_status.value,
        is_anonymous=entry.is_anonymous,
        interactive=entry.is_interactive,
        profile_image_ref=entry.profile_image_ref,
    )


def _reference_location(lat: Optional[float], lon: Optional[float]) -> Optional[GeoPoint]:
    # Sin ubicación => el servicio aplica el fallback "Your Area"
    if lat is None and lon is None:
        return None
    if lat is None or lon is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="lat y lon deben enviarse juntos",
        )
    return GeoPoint(latitude=lat, longitude=lon)


def _upstream_error(e: UpstreamUnavailableError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail={"message": str(e), "retryable": e.retryable},
    )


@router.get("/{variant}", response_model=LeaderboardResponse)
async def get_leaderboard(
    variant: str,
    service: Leaderboards,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    region: Optional[str] = Query(None, description="Nombre de la región para mostrar"),
):
    """
    Obtener un leaderboard.

    Variantes: global_weekly, global_all_time, regional_weekly, regional_all_time
    """
    location = _reference_location(lat, lon)

    try:
        result = await service.query(variant, reference_location=location, region_name=region)
    except UnknownVariantError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except UpstreamUnavailableError as e:
        raise _upstream_error(e)

    return LeaderboardResponse(
        variant=result.variant.value,
        entries=[_to_response(e) for e in result.entries],
        region_label=result.region_label,
        region_unknown=result.region_unknown,
        generated_at=result.generated_at,
    )


@router.get("/{variant}/users/{user_id}", response_model=UserRankResponse)
async def get_user_position(
    variant: str,
    user_id: str,
    service: Leaderboards,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
):
    """
    Obtener la posición de un usuario en un leaderboard (sin el tope de entradas).
    """
    location = _reference_location(lat, lon)

    try:
        result = await service.get_user_rank(variant, user_id, reference_location=location)
    except UnknownVariantError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except UpstreamUnavailableError as e:
        raise _upstream_error(e)

    if not result:
        return UserRankResponse()

    return UserRankResponse(rank=result["rank"], entry=_to_response(result["entry"]))
