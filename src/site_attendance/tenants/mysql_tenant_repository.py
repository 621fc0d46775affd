from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Tenant
from .repository import TenantRepository


class MySQLTenantRepository(TenantRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self) -> Sequence[Tenant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT tenant_id, name, is_active FROM tenants WHERE is_active=1 ORDER BY tenant_id")
            return [
                Tenant(tenant_id=int(r["tenant_id"]), name=r["name"], is_active=bool(r["is_active"]))
                for r in fetchall(cur)
            ]
