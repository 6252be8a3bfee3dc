from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 datetime into a UTC-naive datetime.

    None or "" gives None. A trailing "Z" or an explicit offset is converted
    to UTC; a value without an offset is taken as UTC already.
    """
    s = (value or "").strip()
    if not s:
        return None
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    parsed = datetime.fromisoformat(s)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """
    Parse a loading date. Accepts "YYYY-MM-DD" or a full ISO-8601 datetime,
    in which case the UTC calendar date is kept.
    """
    s = (value or "").strip()
    if not s:
        return None
    if len(s) == 10:
        return date.fromisoformat(s)
    return parse_iso_datetime(s).date()


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """Render a datetime as "YYYY-MM-DDTHH:MM:SSZ". Naive values are UTC."""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.replace(microsecond=0).isoformat() + "Z"


def month_key(d: date) -> str:
    """Calendar month bucket, "YYYY-MM"."""
    return f"{d.year:04d}-{d.month:02d}"
