from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..geo.coordinate import GeoCoordinate
from .model import Site
from .repository import SiteRepository

_COLUMNS = "site_id, tenant_id, site_name, latitude, longitude, geofence_radius_meters, is_active"


def _to_site(r: dict) -> Site:
    radius = r.get("geofence_radius_meters")
    return Site(
        site_id=int(r["site_id"]),
        tenant_id=int(r["tenant_id"]),
        name=r["site_name"],
        coordinate=GeoCoordinate.maybe(r.get("latitude"), r.get("longitude")),
        geofence_radius_meters=int(radius) if radius is not None else None,
        is_active=bool(r["is_active"]),
    )


class MySQLSiteRepository(SiteRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self, *, tenant_id: int) -> Sequence[Site]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM sites WHERE tenant_id=%s AND is_active=1 ORDER BY site_id",
                (int(tenant_id),),
            )
            return [_to_site(r) for r in fetchall(cur)]

    def get_by_id(self, site_id: int) -> Optional[Site]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM sites WHERE site_id=%s", (int(site_id),))
            r = fetchone(cur)
            return _to_site(r) if r else None
