from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..geo.coordinate import GeoCoordinate


@dataclass(frozen=True)
class Site:
    """Construction site; the geofence is a circle around ``coordinate``."""

    site_id: int
    tenant_id: int
    name: str
    coordinate: Optional[GeoCoordinate] = None
    geofence_radius_meters: Optional[int] = None
    is_active: bool = True
