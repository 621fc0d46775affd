from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, to_db_datetime
from .model import AttendanceSummary, AttendanceSummaryRow
from .repository import AttendanceSummaryRepository


class MySQLAttendanceSummaryRepository(AttendanceSummaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, summary: AttendanceSummary) -> None:
        # The unique key (tenant, employee, site, date) makes a re-run replace the row.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_summaries(
                    tenant_id, employee_id, site_id, work_date,
                    expected_start, expected_end, actual_arrival, actual_departure,
                    minutes_on_site, scheduled_hours, variance_hours, utilization_percent,
                    status, is_late, is_early_departure, is_open_ended, has_manual_confirmation,
                    entry_count, exit_count, anomalies, note
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    expected_start=VALUES(expected_start),
                    expected_end=VALUES(expected_end),
                    actual_arrival=VALUES(actual_arrival),
                    actual_departure=VALUES(actual_departure),
                    minutes_on_site=VALUES(minutes_on_site),
                    scheduled_hours=VALUES(scheduled_hours),
                    variance_hours=VALUES(variance_hours),
                    utilization_percent=VALUES(utilization_percent),
                    status=VALUES(status),
                    is_late=VALUES(is_late),
                    is_early_departure=VALUES(is_early_departure),
                    is_open_ended=VALUES(is_open_ended),
                    has_manual_confirmation=VALUES(has_manual_confirmation),
                    entry_count=VALUES(entry_count),
                    exit_count=VALUES(exit_count),
                    anomalies=VALUES(anomalies),
                    note=VALUES(note)
                """,
                (
                    int(summary.tenant_id),
                    summary.employee_id,
                    summary.site_id,
                    summary.work_date,
                    to_db_datetime(summary.expected_start),
                    to_db_datetime(summary.expected_end),
                    to_db_datetime(summary.actual_arrival),
                    to_db_datetime(summary.actual_departure),
                    summary.actual_hours_on_site.total_minutes,
                    summary.scheduled_hours,
                    summary.variance_hours,
                    summary.utilization_percent,
                    summary.status.value,
                    int(summary.is_late),
                    int(summary.is_early_departure),
                    int(summary.is_open_ended),
                    int(summary.has_manual_confirmation),
                    summary.entry_count,
                    summary.exit_count,
                    "\n".join(summary.anomalies) or None,
                    summary.note,
                ),
            )

    def list_range(
        self,
        *,
        tenant_id: int,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceSummaryRow]:
        where = ["s.tenant_id=%s", "s.work_date BETWEEN %s AND %s"]
        params: list = [int(tenant_id), start, end]
        if employee_id:
            where.append("s.employee_id=%s")
            params.append(int(employee_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT s.tenant_id, s.employee_id, e.full_name, s.site_id, st.site_name, s.work_date,
                       s.minutes_on_site, s.scheduled_hours, s.status, s.has_manual_confirmation
                FROM attendance_summaries s
                JOIN employees e ON e.employee_id = s.employee_id
                LEFT JOIN sites st ON st.site_id = s.site_id
                WHERE {" AND ".join(where)}
                ORDER BY s.work_date, e.full_name
                """,
                tuple(params),
            )
            return [
                AttendanceSummaryRow(
                    tenant_id=int(r["tenant_id"]),
                    employee_id=int(r["employee_id"]),
                    employee_name=r["full_name"],
                    site_id=int(r["site_id"]),
                    site_name=r.get("site_name"),
                    work_date=r["work_date"],
                    minutes_on_site=int(r["minutes_on_site"]),
                    scheduled_hours=Decimal(str(r["scheduled_hours"])) if r.get("scheduled_hours") is not None else None,
                    status=AttendanceStatus(r["status"]),
                    has_manual_confirmation=bool(r["has_manual_confirmation"]),
                )
                for r in fetchall(cur)
            ]
