from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import day_end, day_start
from ..core.enums import EventType, TriggerMethod
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchall, fetchone, to_db_datetime
from ..geo.coordinate import GeoCoordinate
from .model import GeofenceEvent
from .repository import GeofenceEventRepository

_COLUMNS = "event_id, employee_id, site_id, event_type, event_time, latitude, longitude, trigger_method, is_noise"


def _to_event(r: dict) -> GeofenceEvent:
    # Enum strings are validated here, at the storage boundary.
    return GeofenceEvent(
        event_id=int(r["event_id"]),
        employee_id=int(r["employee_id"]),
        site_id=int(r["site_id"]),
        event_type=EventType.parse(r["event_type"]),
        timestamp=as_utc(r["event_time"]),
        coordinate=GeoCoordinate.maybe(r.get("latitude"), r.get("longitude")),
        trigger_method=TriggerMethod.parse(r["trigger_method"]),
        is_noise=bool(r.get("is_noise")),
    )


class MySQLGeofenceEventRepository(GeofenceEventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_between(self, *, tenant_id: int, start: datetime, end: datetime) -> Sequence[GeofenceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE tenant_id=%s AND event_time >= %s AND event_time < %s
                ORDER BY employee_id, site_id, event_time, event_id
                """,
                (int(tenant_id), to_db_datetime(start), to_db_datetime(end)),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def first_entry_of_day(
        self, *, tenant_id: int, employee_id: int, site_id: int, work_date: date
    ) -> Optional[GeofenceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE tenant_id=%s AND employee_id=%s AND site_id=%s
                  AND event_time >= %s AND event_time < %s
                  AND event_type=%s AND is_noise=0
                ORDER BY event_time
                LIMIT 1
                """,
                (
                    int(tenant_id),
                    int(employee_id),
                    int(site_id),
                    to_db_datetime(day_start(work_date)),
                    to_db_datetime(day_end(work_date)),
                    EventType.ENTER.value,
                ),
            )
            r = fetchone(cur)
            return _to_event(r) if r else None

    def last_event_before(
        self, *, tenant_id: int, employee_id: int, site_id: int, at: datetime
    ) -> Optional[GeofenceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE tenant_id=%s AND employee_id=%s AND site_id=%s
                  AND event_time >= %s AND event_time < %s AND is_noise=0
                ORDER BY event_time DESC, event_id DESC
                LIMIT 1
                """,
                (
                    int(tenant_id),
                    int(employee_id),
                    int(site_id),
                    to_db_datetime(day_start(at.date())),
                    to_db_datetime(at),
                ),
            )
            r = fetchone(cur)
            return _to_event(r) if r else None

    def add(self, *, tenant_id: int, event: GeofenceEvent) -> int:
        coordinate = event.coordinate
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_events(
                    tenant_id, employee_id, site_id, event_type, event_time,
                    latitude, longitude, trigger_method, is_noise
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(tenant_id),
                    event.employee_id,
                    event.site_id,
                    event.event_type.value,
                    to_db_datetime(event.timestamp),
                    coordinate.latitude if coordinate else None,
                    coordinate.longitude if coordinate else None,
                    event.trigger_method.value,
                    int(event.is_noise),
                ),
            )
            return int(cur.lastrowid)
