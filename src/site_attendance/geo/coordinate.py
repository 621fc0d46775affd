from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal

from ..common.validators import require_decimal
from ..core.constants import EARTH_RADIUS_METERS
from ..core.exceptions import OutOfRangeError


@dataclass(frozen=True)
class GeoCoordinate:
    """Immutable geographic point in decimal degrees."""

    latitude: Decimal
    longitude: Decimal

    def __post_init__(self):
        latitude = require_decimal(self.latitude, "latitude")
        longitude = require_decimal(self.longitude, "longitude")
        if not Decimal(-90) <= latitude <= Decimal(90):
            raise OutOfRangeError(f"latitude {latitude} is outside [-90, 90]")
        if not Decimal(-180) <= longitude <= Decimal(180):
            raise OutOfRangeError(f"longitude {longitude} is outside [-180, 180]")
        object.__setattr__(self, "latitude", latitude)
        object.__setattr__(self, "longitude", longitude)

    def distance_to(self, other: "GeoCoordinate") -> float:
        """Great-circle distance in metres (haversine)."""

        lat1 = math.radians(float(self.latitude))
        lat2 = math.radians(float(other.latitude))
        delta_lat = math.radians(float(other.latitude) - float(self.latitude))
        delta_lon = math.radians(float(other.longitude) - float(self.longitude))

        a = (
            math.sin(delta_lat / 2) ** 2
            + math.cos(lat1) * math.cos(lat2) * math.sin(delta_lon / 2) ** 2
        )
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
        return EARTH_RADIUS_METERS * c

    @classmethod
    def maybe(cls, latitude, longitude) -> "GeoCoordinate | None":
        """Build a coordinate when both parts are present, else ``None``."""

        if latitude is None or longitude is None:
            return None
        return cls(latitude, longitude)
