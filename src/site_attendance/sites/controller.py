from __future__ import annotations

import math

from flask import Flask, jsonify, request

from ..common.request_context import current_tenant_id
from ..container import Container
from ..core.exceptions import ValidationError
from ..geo.coordinate import GeoCoordinate
from ..tenants.model import AttendanceSettings


def _point_from_args() -> GeoCoordinate:
    lat, lng = request.args.get("latitude"), request.args.get("longitude")
    if lat is None or lng is None:
        raise ValidationError("latitude and longitude are required")
    return GeoCoordinate(lat, lng)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sites/nearest", methods=["GET"], endpoint="nearest_site")
    def nearest_site():
        tenant_id = current_tenant_id()
        point = _point_from_args()
        site, distance = container.geofence_service.find_nearest_site(
            container.sites_repo.list_active(tenant_id=tenant_id), point
        )
        if site is None:
            return jsonify({"site": None, "distance_meters": None})

        settings = container.settings_repo.get_for_tenant(tenant_id) or AttendanceSettings.defaults(tenant_id)
        within = container.geofence_service.is_within_geofence(
            site, point, default_radius_meters=settings.geofence_radius_meters
        )
        return jsonify(
            {
                "site": {"site_id": site.site_id, "name": site.name},
                "distance_meters": None if math.isinf(distance) else round(distance, 2),
                "within_geofence": within,
            }
        )
