from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request

from ..common.datetime_utils import utc_today
from ..common.request_context import current_tenant_id, date_arg
from ..container import Container
from ..core.exceptions import ValidationError
from .model import GeofenceEvent


def _event_json(e: GeofenceEvent) -> dict:
    return {
        "event_id": e.event_id,
        "employee_id": e.employee_id,
        "site_id": e.site_id,
        "event_type": e.event_type.value,
        "timestamp": e.timestamp.isoformat(),
        "trigger_method": e.trigger_method.value,
        "is_noise": e.is_noise,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/events", methods=["POST"], endpoint="record_event")
    def record_event():
        event = container.event_service.record_event(current_tenant_id(), request.get_json(silent=True) or {})
        return jsonify(_event_json(event)), 201

    @app.route("/api/attendance/events/batch", methods=["POST"], endpoint="record_events_batch")
    def record_events_batch():
        payload = request.get_json(silent=True)
        if not isinstance(payload, list):
            raise ValidationError("Expected a JSON array of events")
        events = container.event_service.record_events_batch(current_tenant_id(), payload)
        return jsonify([_event_json(e) for e in events]), 201

    @app.route("/api/attendance/summaries", methods=["GET"], endpoint="list_summaries")
    def list_summaries():
        today = utc_today()
        start = date_arg(request.args, "from", today - timedelta(days=7))
        end = date_arg(request.args, "to", today)
        employee_id = request.args.get("employee_id", type=int)

        rows = container.summaries_repo.list_range(
            tenant_id=current_tenant_id(), start=start, end=end, employee_id=employee_id
        )
        return jsonify(
            [
                {
                    "employee_id": r.employee_id,
                    "employee_name": r.employee_name,
                    "site_id": r.site_id,
                    "site_name": r.site_name or "-",
                    "work_date": r.work_date.strftime("%Y-%m-%d"),
                    "worked_hours": f"{r.minutes_on_site // 60:02d}:{r.minutes_on_site % 60:02d}",
                    "status": r.status.value,
                    "has_spa": r.has_manual_confirmation,
                }
                for r in rows
            ]
        )

    @app.route("/api/attendance/performance", methods=["GET"], endpoint="employee_performance")
    def employee_performance():
        today = utc_today()
        start = date_arg(request.args, "from", today - timedelta(days=30))
        end = date_arg(request.args, "to", today)
        rows = container.analytics_service.employee_performance(current_tenant_id(), start, end)
        return jsonify([r.to_dict() for r in rows])
