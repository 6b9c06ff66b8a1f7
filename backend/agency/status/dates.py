"""
Date coercion and "naive" display helpers.

Stored dates carry the wall-clock value that was entered; display helpers read
the date/time components straight from the ISO text so no timezone shift can
creep in. `to_date` is only meant for comparisons.
"""
import re
from datetime import date, datetime, timezone
from typing import Optional, Union

DateLike = Union[datetime, date, str, None]

_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_ISO_DATETIME_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})[T ](\d{2}):(\d{2})")
_OFFSET_RE = re.compile(r"[+-]\d{2}:\d{2}$")


def _parse_string(value: str) -> Optional[datetime]:
    text = value.strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.strptime(text, "%d.%m.%Y")
    except ValueError:
        return None


def to_date(value: DateLike) -> Optional[datetime]:
    """Coerce a nullable date-like value into a datetime, or None if it is not one."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        return _parse_string(value)
    return None


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def is_in_past(value: DateLike, now: Optional[datetime] = None) -> bool:
    parsed = to_date(value)
    if parsed is None:
        return False
    reference = now or datetime.utcnow()
    return _as_naive_utc(parsed) < _as_naive_utc(reference)


def to_naive_date(text: Optional[str]) -> Optional[datetime]:
    """Parse form input without timezone conversion (entered time is kept as is)."""
    if not text or not text.strip():
        return None
    trimmed = text.strip()
    if trimmed.endswith("Z") or _OFFSET_RE.search(trimmed):
        return to_date(trimmed)
    if "T" not in trimmed:
        return to_date(trimmed + "T00:00:00")
    return to_date(trimmed)


def _iso_text(value: DateLike) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, str):
        return value
    return None


def format_naive_date(value: DateLike, fallback: str = "-") -> str:
    text = _iso_text(value)
    match = _ISO_DATE_RE.match(text) if text else None
    if not match:
        return fallback
    year, month, day = match.groups()
    return f"{day}.{month}.{year}"


def format_naive_date_short(value: DateLike, fallback: str = "") -> str:
    text = _iso_text(value)
    match = _ISO_DATE_RE.match(text) if text else None
    if not match:
        return fallback
    year, month, day = match.groups()
    return f"{day}.{month}.{year[2:]}"


def format_naive_datetime(value: DateLike, fallback: str = "-") -> str:
    text = _iso_text(value)
    match = _ISO_DATETIME_RE.match(text) if text else None
    if not match:
        return fallback
    year, month, day, hours, minutes = match.groups()
    return f"{day}.{month}.{year}, {hours}:{minutes}"


def format_naive_time(value: DateLike, fallback: str = "-") -> str:
    text = _iso_text(value)
    match = _ISO_DATETIME_RE.match(text) if text else None
    if not match:
        return fallback
    return f"{match.group(4)}:{match.group(5)}"
