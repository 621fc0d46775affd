from __future__ import annotations

from datetime import date
from typing import Optional

from flask import request

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def current_tenant_id() -> int:
    """Tenant of the calling API client (``X-Tenant-Id`` header)."""

    raw = request.headers.get("X-Tenant-Id", "").strip()
    if not raw.isdigit():
        raise ValidationError("Missing or invalid X-Tenant-Id header")
    return int(raw)


def date_arg(source: dict, name: str, default: Optional[date] = None) -> Optional[date]:
    raw = source.get(name)
    if isinstance(raw, str):
        raw = raw.strip()
    if not raw:
        return default
    try:
        return parse_iso_date(str(raw))
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be YYYY-MM-DD") from None
