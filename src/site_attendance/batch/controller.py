from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.request_context import date_arg
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/process", methods=["POST"], endpoint="process_attendance")
    def process_attendance():
        """Manually (re)build summaries for a date range.

        Useful when the scheduled daily job has not run yet.
        """

        body = request.get_json(silent=True) or {}
        from_date = date_arg(body, "from_date")
        to_date = date_arg(body, "to_date")

        logger.info("Manual attendance processing requested from=%s to=%s", from_date, to_date)
        results = container.daily_batch.run_date_range(from_date, to_date)
        return jsonify(
            {
                "dates_processed": len(results),
                "processed_count": sum(r.processed_count for r in results),
                "failed_count": sum(r.failed_count for r in results),
                "details": [r.to_dict() for r in results],
            }
        )
