"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

EARTH_RADIUS_METERS = 6_371_000.0

DEFAULT_DEBOUNCE_MINUTES = 2
DEFAULT_GRACE_MINUTES = 10
DEFAULT_EXPECTED_HOURS_PER_DAY = Decimal("7.5")

DEFAULT_GEOFENCE_RADIUS_METERS = 100
DEFAULT_NOISE_THRESHOLD_METERS = 150

DEFAULT_BATCH_MAX_WORKERS = 4
DEFAULT_PERSIST_ATTEMPTS = 3
DEFAULT_RETRY_BACKOFF_SECONDS = 0.5
DEFAULT_PROCESSING_LOOKBACK_DAYS = 30
