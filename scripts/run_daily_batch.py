"""Run the daily attendance reconciliation.

Usage:
    python scripts/run_daily_batch.py                 # yesterday (UTC)
    python scripts/run_daily_batch.py --date 2026-02-01
    python scripts/run_daily_batch.py --from 2026-01-01 --to 2026-01-31

Meant to be triggered once per date by the scheduler; concurrent runs for
the same date must be prevented by the caller.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import signal
import sys
import threading
from datetime import timedelta

from dotenv import load_dotenv

from site_attendance.common.datetime_utils import parse_iso_date, utc_today
from site_attendance.config import get_settings_module
from site_attendance.container import build_container_from_settings
from site_attendance.main import configure_logging

logger = logging.getLogger("site_attendance.scripts.run_daily_batch")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--date", type=parse_iso_date, help="single date to process (YYYY-MM-DD)")
    parser.add_argument("--from", dest="from_date", type=parse_iso_date, help="first date of a range")
    parser.add_argument("--to", dest="to_date", type=parse_iso_date, help="last date of a range")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(bool(getattr(settings, "DEBUG", False)))
    container = build_container_from_settings(settings)

    # Ctrl+C / SIGTERM stop the run between tenants.
    cancel = threading.Event()
    signal.signal(signal.SIGINT, lambda *_: cancel.set())
    signal.signal(signal.SIGTERM, lambda *_: cancel.set())

    if args.from_date or args.to_date:
        results = container.daily_batch.run_date_range(args.from_date, args.to_date, cancel_event=cancel)
    else:
        work_date = args.date or utc_today() - timedelta(days=1)
        results = [container.daily_batch.run_daily_batch(work_date, cancel_event=cancel)]

    failed = 0
    for result in results:
        failed += result.failed_count
        for failure in result.failures:
            logger.error(
                "FAILED %s tenant=%s employee=%s site=%s: %s",
                result.work_date, failure.tenant_id, failure.employee_id, failure.site_id, failure.reason,
            )
        print(
            f"{result.work_date}: processed={result.processed_count} failed={result.failed_count} "
            f"skipped={result.skipped_count}{' (cancelled)' if result.cancelled else ''}"
        )
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
