import math
from pydantic import BaseModel, Field

METERS_PER_DEGREE_LAT = 111_320.0


class GeoPoint(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    class Config:
        frozen = True


class BoundingBox(BaseModel):
    """Caja lat/lon aproximada para prefiltrar en la base de datos"""

    min_latitude: float
    max_latitude: float
    # None cuando la caja cruza el antimeridiano o toca un polo
    min_longitude: float | None = None
    max_longitude: float | None = None

    @classmethod
    def around(cls, center: GeoPoint, radius_meters: float) -> "BoundingBox":
        lat_delta = radius_meters / METERS_PER_DEGREE_LAT
        min_lat = max(-90.0, center.latitude - lat_delta)
        max_lat = min(90.0, center.latitude + lat_delta)

        cos_lat = math.cos(math.radians(center.latitude))
        if cos_lat <= 1e-9 or min_lat <= -90.0 or max_lat >= 90.0:
            return cls(min_latitude=min_lat, max_latitude=max_lat)

        lon_delta = radius_meters / (METERS_PER_DEGREE_LAT * cos_lat)
        min_lon = center.longitude - lon_delta
        max_lon = center.longitude + lon_delta
        if min_lon < -180.0 or max_lon > 180.0:
            return cls(min_latitude=min_lat, max_latitude=max_lat)

        return cls(
            min_latitude=min_lat,
            max_latitude=max_lat,
            min_longitude=min_lon,
            max_longitude=max_lon,
        )
