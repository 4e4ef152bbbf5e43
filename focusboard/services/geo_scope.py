"""
GeoScopeFilter - decides whether a session falls inside a region.

A scope is either FILTERED (reference point + radius, great-circle distance)
or NO_LOCATION_FALLBACK, used when the caller has no reference location and
every record is treated as in-region.
"""

import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from focusboard.schemas.location import BoundingBox, GeoPoint

EARTH_RADIUS_METERS = 6_371_008.8
METERS_PER_MILE = 1609.344
DEFAULT_REGION_RADIUS_METERS = 24_140.0  # ~15 miles


def haversine_meters(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points, in meters."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(h)))


def is_within(
    record_location: Optional[GeoPoint],
    reference: GeoPoint,
    radius_meters: float = DEFAULT_REGION_RADIUS_METERS,
) -> bool:
    """A record with no location is never inside a region."""
    if record_location is None:
        return False
    return haversine_meters(record_location, reference) <= radius_meters


class GeoScopeMode(str, Enum):
    FILTERED = "filtered"
    NO_LOCATION_FALLBACK = "no_location_fallback"


class GeoScope(BaseModel):
    mode: GeoScopeMode
    reference: Optional[GeoPoint] = None
    radius_meters: float = DEFAULT_REGION_RADIUS_METERS

    class Config:
        frozen = True

    @classmethod
    def around(
        cls,
        reference: GeoPoint,
        radius_meters: float = DEFAULT_REGION_RADIUS_METERS,
    ) -> "GeoScope":
        return cls(mode=GeoScopeMode.FILTERED, reference=reference, radius_meters=radius_meters)

    @classmethod
    def no_location_fallback(cls) -> "GeoScope":
        return cls(mode=GeoScopeMode.NO_LOCATION_FALLBACK)

    @classmethod
    def for_reference(
        cls,
        reference: Optional[GeoPoint],
        radius_meters: float = DEFAULT_REGION_RADIUS_METERS,
    ) -> "GeoScope":
        if reference is None:
            return cls.no_location_fallback()
        return cls.around(reference, radius_meters)

    @property
    def is_fallback(self) -> bool:
        return self.mode is GeoScopeMode.NO_LOCATION_FALLBACK

    def bounding_box(self) -> Optional[BoundingBox]:
        """Store-side prefilter; None when the scope does not filter."""
        if self.is_fallback or self.reference is None:
            return None
        return BoundingBox.around(self.reference, self.radius_meters)

    def contains(self, location: Optional[GeoPoint]) -> bool:
        if self.is_fallback:
            return True
        return is_within(location, self.reference, self.radius_meters)
