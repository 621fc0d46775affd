from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchall
from .model import ScheduledShift
from .repository import ScheduleRepository


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_date(self, *, tenant_id: int, work_date: date) -> Sequence[ScheduledShift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, site_id, work_date, expected_start, expected_end
                FROM scheduled_shifts
                WHERE tenant_id=%s AND work_date=%s
                """,
                (int(tenant_id), work_date),
            )
            return [
                ScheduledShift(
                    employee_id=int(r["employee_id"]),
                    site_id=int(r["site_id"]),
                    work_date=r["work_date"],
                    expected_start=as_utc(r["expected_start"]),
                    expected_end=as_utc(r["expected_end"]),
                )
                for r in fetchall(cur)
            ]
