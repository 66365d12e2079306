"""
Timestamp helpers.

Entries store their creation instant as a canonical ISO-8601 UTC string with
millisecond precision and a trailing 'Z' (2024-05-01T10:00:00.000Z). Strings in
that form sort chronologically, so date filters and min/max work on them directly.
"""
from datetime import date, datetime, time, timezone
from typing import Optional


def format_instant(moment: datetime) -> str:
    """
    Format a datetime as a canonical UTC timestamp string.

    Naive datetimes are treated as UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def utc_now_iso() -> str:
    """Current instant as a canonical timestamp string."""
    return format_instant(datetime.now(timezone.utc))


def normalize_date_bound(value: Optional[str], end_of_range: bool = False) -> Optional[str]:
    """
    Convert a user supplied date filter into a canonical timestamp string.

    Accepts full ISO-8601 instants ("2024-05-01T10:00:00Z") and plain dates
    ("2024-05-01"). A plain date used as the end of a range covers the whole
    day, so entries logged later that day still match an inclusive bound.

    Args:
        value: Raw filter value, or None/blank for "no bound"
        end_of_range: Whether the value is the upper bound

    Returns:
        Canonical timestamp string, or None when no bound was given

    Raises:
        ValueError: If the value is not a valid ISO-8601 date or instant
    """
    if value is None or not value.strip():
        return None

    raw = value.strip()
    if "T" not in raw and " " not in raw:
        day = date.fromisoformat(raw)
        boundary = time(23, 59, 59, 999000) if end_of_range else time(0, 0)
        return format_instant(datetime.combine(day, boundary, tzinfo=timezone.utc))

    if raw.endswith(("z", "Z")):
        raw = raw[:-1] + "+00:00"
    return format_instant(datetime.fromisoformat(raw))
