from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchall
from ..geo.coordinate import GeoCoordinate
from .model import SitePhotoAttendance
from .repository import SitePhotoAttendanceRepository


class MySQLSitePhotoAttendanceRepository(SitePhotoAttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_date(self, *, tenant_id: int, work_date: date) -> Sequence[SitePhotoAttendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, site_id, event_date, captured_at, image_url, signature_url,
                       latitude, longitude, distance_to_site
                FROM site_photo_attendances
                WHERE tenant_id=%s AND event_date=%s
                ORDER BY captured_at
                """,
                (int(tenant_id), work_date),
            )
            return [
                SitePhotoAttendance(
                    employee_id=int(r["employee_id"]),
                    site_id=int(r["site_id"]),
                    work_date=r["event_date"],
                    captured_at=as_utc(r["captured_at"]),
                    has_image=bool(r.get("image_url")),
                    has_signature=bool(r.get("signature_url")),
                    coordinate=GeoCoordinate.maybe(r.get("latitude"), r.get("longitude")),
                    distance_to_site=r.get("distance_to_site"),
                )
                for r in fetchall(cur)
            ]

    def count_by_employee(self, *, tenant_id: int, start: date, end: date) -> dict[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, COUNT(*) AS spa_count
                FROM site_photo_attendances
                WHERE tenant_id=%s AND event_date BETWEEN %s AND %s
                GROUP BY employee_id
                """,
                (int(tenant_id), start, end),
            )
            return {int(r["employee_id"]): int(r["spa_count"]) for r in fetchall(cur)}
