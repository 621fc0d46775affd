from __future__ import annotations

from dataclasses import dataclass

from .analytics.service import AttendanceAnalyticsService
from .attendance.mysql_event_repository import MySQLGeofenceEventRepository
from .attendance.mysql_photo_attendance_repository import MySQLSitePhotoAttendanceRepository
from .attendance.mysql_summary_repository import MySQLAttendanceSummaryRepository
from .attendance.service import AttendanceEventService
from .batch.service import DailyAttendanceBatch
from .core.constants import DEFAULT_BATCH_MAX_WORKERS, DEFAULT_PERSIST_ATTEMPTS, DEFAULT_RETRY_BACKOFF_SECONDS
from .database.connection import DatabaseConnection, DBConfig
from .geo.service import GeofenceService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .sites.mysql_site_repository import MySQLSiteRepository
from .tenants.mysql_settings_repository import MySQLAttendanceSettingsRepository, MySQLBankHolidayRepository
from .tenants.mysql_tenant_repository import MySQLTenantRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    tenants_repo: MySQLTenantRepository
    settings_repo: MySQLAttendanceSettingsRepository
    holidays_repo: MySQLBankHolidayRepository
    sites_repo: MySQLSiteRepository
    schedules_repo: MySQLScheduleRepository
    events_repo: MySQLGeofenceEventRepository
    photo_attendance_repo: MySQLSitePhotoAttendanceRepository
    summaries_repo: MySQLAttendanceSummaryRepository

    geofence_service: GeofenceService
    event_service: AttendanceEventService
    daily_batch: DailyAttendanceBatch
    analytics_service: AttendanceAnalyticsService


def build_container(
    *,
    db_config: dict,
    max_workers: int = DEFAULT_BATCH_MAX_WORKERS,
    persist_attempts: int = DEFAULT_PERSIST_ATTEMPTS,
    retry_backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    tenants_repo = MySQLTenantRepository(conn)
    settings_repo = MySQLAttendanceSettingsRepository(conn)
    holidays_repo = MySQLBankHolidayRepository(conn)
    sites_repo = MySQLSiteRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)
    events_repo = MySQLGeofenceEventRepository(conn)
    photo_attendance_repo = MySQLSitePhotoAttendanceRepository(conn)
    summaries_repo = MySQLAttendanceSummaryRepository(conn)

    geofence_service = GeofenceService()
    event_service = AttendanceEventService(events_repo, settings_repo, geofence=geofence_service)
    daily_batch = DailyAttendanceBatch(
        tenants_repo,
        events_repo,
        schedules_repo,
        photo_attendance_repo,
        summaries_repo,
        settings_repo,
        max_workers=max_workers,
        max_persist_attempts=persist_attempts,
        retry_backoff_seconds=retry_backoff_seconds,
    )
    analytics_service = AttendanceAnalyticsService(summaries_repo, photo_attendance_repo, settings_repo, holidays_repo)

    return Container(
        conn=conn,
        tenants_repo=tenants_repo,
        settings_repo=settings_repo,
        holidays_repo=holidays_repo,
        sites_repo=sites_repo,
        schedules_repo=schedules_repo,
        events_repo=events_repo,
        photo_attendance_repo=photo_attendance_repo,
        summaries_repo=summaries_repo,
        geofence_service=geofence_service,
        event_service=event_service,
        daily_batch=daily_batch,
        analytics_service=analytics_service,
    )


def build_container_from_settings(settings) -> Container:
    return build_container(
        db_config=getattr(settings, "DB_CONFIG"),
        max_workers=int(getattr(settings, "BATCH_MAX_WORKERS", DEFAULT_BATCH_MAX_WORKERS)),
        persist_attempts=int(getattr(settings, "BATCH_PERSIST_ATTEMPTS", DEFAULT_PERSIST_ATTEMPTS)),
        retry_backoff_seconds=float(getattr(settings, "BATCH_RETRY_BACKOFF_SECONDS", DEFAULT_RETRY_BACKOFF_SECONDS)),
    )
