from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from ..attendance.model import GeofenceEvent
from ..core.constants import DEFAULT_GEOFENCE_RADIUS_METERS, DEFAULT_NOISE_THRESHOLD_METERS
from ..sites.model import Site
from .coordinate import GeoCoordinate


@dataclass(frozen=True)
class NoiseCheck:
    is_noise: bool
    distance: Optional[float] = None


class GeofenceService:
    """Distance checks between employees' positions and site geofences."""

    def find_nearest_site(self, sites: Sequence[Site], point: GeoCoordinate) -> tuple[Optional[Site], float]:
        active = [s for s in sites if s.is_active]
        if not active:
            return None, math.inf

        located = [s for s in active if s.coordinate is not None]
        if not located:
            # No site has coordinates configured yet.
            return active[0], math.inf

        nearest = min(located, key=lambda s: s.coordinate.distance_to(point))
        return nearest, nearest.coordinate.distance_to(point)

    def is_within_geofence(
        self,
        site: Site,
        point: GeoCoordinate,
        *,
        default_radius_meters: int = DEFAULT_GEOFENCE_RADIUS_METERS,
    ) -> bool:
        # Sites without coordinates accept any check-in (backwards compatibility).
        if site.coordinate is None:
            return True
        radius = site.geofence_radius_meters or default_radius_meters
        return site.coordinate.distance_to(point) <= radius

    def check_for_noise(
        self,
        event: GeofenceEvent,
        first_entry: Optional[GeofenceEvent],
        *,
        previous: Optional[GeofenceEvent] = None,
        threshold_meters: int = DEFAULT_NOISE_THRESHOLD_METERS,
    ) -> NoiseCheck:
        """A re-entry close to where the day's first entry happened is GPS noise.

        Only an Enter while the employee is still inside (``previous`` is an
        Enter) is a candidate; after an Exit the Enter is a real re-entry.
        Without coordinates on both sides nothing can be decided.
        """

        if not event.is_enter or first_entry is None:
            return NoiseCheck(is_noise=False)
        if previous is None or not previous.is_enter:
            return NoiseCheck(is_noise=False)
        if event.coordinate is None or first_entry.coordinate is None:
            return NoiseCheck(is_noise=False)

        distance = first_entry.coordinate.distance_to(event.coordinate)
        return NoiseCheck(is_noise=distance <= threshold_meters, distance=distance)
