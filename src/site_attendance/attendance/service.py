from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Iterable

from ..common.datetime_utils import ensure_utc, parse_iso_datetime
from ..common.validators import require_int, require_non_empty
from ..core.constants import DEFAULT_NOISE_THRESHOLD_METERS
from ..core.enums import EventType, TriggerMethod
from ..core.exceptions import ValidationError
from ..geo.coordinate import GeoCoordinate
from ..geo.service import GeofenceService
from ..tenants.repository import AttendanceSettingsRepository
from .model import GeofenceEvent
from .repository import GeofenceEventRepository

logger = logging.getLogger(__name__)


class AttendanceEventService:
    """Ingests geofence events from the mobile app.

    Raw strings are turned into enums and coordinates here, once; everything
    downstream works with typed ``GeofenceEvent`` values.
    """

    def __init__(
        self,
        events: GeofenceEventRepository,
        settings: AttendanceSettingsRepository | None = None,
        *,
        geofence: GeofenceService | None = None,
    ):
        self._events = events
        self._settings = settings
        self._geofence = geofence or GeofenceService()

    def parse_event(self, payload: dict) -> GeofenceEvent:
        if not isinstance(payload, dict):
            raise ValidationError("Event payload must be an object")

        raw_ts = payload.get("timestamp")
        if isinstance(raw_ts, datetime):
            timestamp = ensure_utc(raw_ts)
        else:
            try:
                timestamp = parse_iso_datetime(require_non_empty(raw_ts, "timestamp"))
            except ValueError:
                raise ValidationError(f"Invalid timestamp: {raw_ts!r}") from None

        return GeofenceEvent(
            employee_id=require_int(payload.get("employee_id"), "employee_id"),
            site_id=require_int(payload.get("site_id"), "site_id"),
            event_type=EventType.parse(payload.get("event_type")),
            timestamp=timestamp,
            coordinate=GeoCoordinate.maybe(payload.get("latitude"), payload.get("longitude")),
            trigger_method=TriggerMethod.parse(payload.get("trigger_method") or TriggerMethod.AUTOMATIC),
        )

    def record_event(self, tenant_id: int, payload: dict) -> GeofenceEvent:
        return self._record(tenant_id, self.parse_event(payload))

    def record_events_batch(self, tenant_id: int, payloads: Iterable[dict]) -> list[GeofenceEvent]:
        """Offline sync: validate everything first, then store in time order."""

        parsed = sorted((self.parse_event(p) for p in payloads), key=lambda e: e.timestamp)
        return [self._record(tenant_id, e) for e in parsed]

    def _record(self, tenant_id: int, event: GeofenceEvent) -> GeofenceEvent:
        first_entry = self._events.first_entry_of_day(
            tenant_id=tenant_id,
            employee_id=event.employee_id,
            site_id=event.site_id,
            work_date=event.timestamp.date(),
        )
        previous = None
        if event.is_enter and first_entry is not None:
            previous = self._events.last_event_before(
                tenant_id=tenant_id,
                employee_id=event.employee_id,
                site_id=event.site_id,
                at=event.timestamp,
            )
        check = self._geofence.check_for_noise(
            event, first_entry, previous=previous, threshold_meters=self._noise_threshold(tenant_id)
        )
        if check.is_noise:
            logger.info(
                "Flagging event as noise tenant=%s employee=%s site=%s distance=%.1fm",
                tenant_id, event.employee_id, event.site_id, check.distance,
            )
            event = replace(event, is_noise=True)

        event_id = self._events.add(tenant_id=tenant_id, event=event)
        return replace(event, event_id=event_id)

    def _noise_threshold(self, tenant_id: int) -> int:
        settings = self._settings.get_for_tenant(tenant_id) if self._settings else None
        return settings.noise_threshold_meters if settings else DEFAULT_NOISE_THRESHOLD_METERS
