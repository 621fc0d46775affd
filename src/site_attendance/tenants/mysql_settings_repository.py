from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceSettings
from .repository import AttendanceSettingsRepository, BankHolidayRepository


class MySQLAttendanceSettingsRepository(AttendanceSettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_tenant(self, tenant_id: int) -> Optional[AttendanceSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT tenant_id, expected_hours_per_day, late_threshold_minutes, debounce_minutes,
                       geofence_radius_meters, noise_threshold_meters, include_saturday, include_sunday
                FROM attendance_settings
                WHERE tenant_id=%s
                """,
                (int(tenant_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return AttendanceSettings(
                tenant_id=int(r["tenant_id"]),
                expected_hours_per_day=Decimal(str(r["expected_hours_per_day"])),
                late_threshold_minutes=int(r["late_threshold_minutes"]),
                debounce_minutes=int(r["debounce_minutes"]),
                geofence_radius_meters=int(r["geofence_radius_meters"]),
                noise_threshold_meters=int(r["noise_threshold_meters"]),
                include_saturday=bool(r["include_saturday"]),
                include_sunday=bool(r["include_sunday"]),
            )


class MySQLBankHolidayRepository(BankHolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_dates(self, *, tenant_id: int, start: date, end: date) -> Sequence[date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_date FROM bank_holidays
                WHERE tenant_id=%s AND holiday_date BETWEEN %s AND %s
                ORDER BY holiday_date
                """,
                (int(tenant_id), start, end),
            )
            return [r["holiday_date"] for r in fetchall(cur)]
