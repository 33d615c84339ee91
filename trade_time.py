from __future__ import annotations

import datetime as _dt
from typing import Any


def utc_now() -> _dt.datetime:
    return _dt.datetime.now(_dt.timezone.utc)


def to_utc_iso(value: _dt.datetime) -> str:
    """
    Render a datetime as a UTC ISO-8601 string with millisecond precision and a 'Z' suffix.
    Naive datetimes are treated as UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=_dt.timezone.utc)
    value = value.astimezone(_dt.timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_created_at(value: Any, *, field: str = "createdAt") -> _dt.datetime:
    """
    Parse a trade timestamp into an aware UTC datetime.
    Fail-loud. Accepts datetime objects and ISO strings (with 'Z' or an offset).
    """
    if value is None:
        raise ValueError(f"{field} is required")
    if isinstance(value, _dt.datetime):
        parsed = value
    else:
        s = str(value).strip()
        if not s:
            raise ValueError(f"{field} is required")
        if s.endswith("Z") or s.endswith("z"):
            s = s[:-1] + "+00:00"
        try:
            parsed = _dt.datetime.fromisoformat(s)
        except ValueError as exc:
            raise ValueError(f"Invalid {field}: {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=_dt.timezone.utc)
    return parsed.astimezone(_dt.timezone.utc)


def normalize_created_at(value: Any, *, field: str = "createdAt") -> str:
    return to_utc_iso(parse_created_at(value, field=field))
