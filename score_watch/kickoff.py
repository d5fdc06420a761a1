from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Optional, Tuple

from score_watch.livescore_client.base import FormatError

_INT_RE = re.compile(r"\d{1,4}", re.ASCII)


def _parse_int(text: str, what: str) -> int:
    s = text.strip()
    if not _INT_RE.fullmatch(s):
        raise FormatError(f"{what} cannot be parsed: {text!r}")
    return int(s)


def _parse_time(text: str) -> time:
    if ":" not in text:
        raise FormatError(f"time should have one colon: {text!r}")
    hour, minute = text.split(":", 1)
    h = _parse_int(hour, "hour")
    m = _parse_int(minute, "minute")
    try:
        return time(h, m)
    except ValueError as e:
        raise FormatError(f"invalid time {text!r}: {e}") from None


def _parse_day_month(text: str, year: int) -> date:
    parts = text.split(".")
    if len(parts) < 2:
        raise FormatError(f"date: month part missing in {text!r}")
    day = _parse_int(parts[0], "day")
    month = _parse_int(parts[1], "month")
    try:
        return date(year, month, day)
    except ValueError as e:
        raise FormatError(f"invalid date {text!r}: {e}") from None


def _ensure_unambiguous_local(dt: datetime) -> datetime:
    # Both folds map to the same instant only for an ordinary wall-clock time.
    try:
        ts0 = dt.replace(fold=0).timestamp()
        ts1 = dt.replace(fold=1).timestamp()
    except (OverflowError, OSError, ValueError) as e:
        raise FormatError(f"cannot resolve local time {dt.isoformat()}: {e}") from None
    if ts0 != ts1:
        raise FormatError(f"local time {dt.isoformat()} is ambiguous or nonexistent (clock change)")
    return dt


def parse_kickoff(text: Optional[str], *, now: Optional[datetime] = None) -> datetime:
    """
    Parse a kick-off fragment into a naive local datetime.

    Accepted forms:
      "HH:MM"          -> today at HH:MM
      "DD.MM HH:MM"    -> current year (a trailing dot after the month is allowed)

    Raises FormatError for anything else, including wall-clock times that
    fall into a DST gap or overlap.
    """
    if text is None:
        raise FormatError("kick-off text is missing")
    value = text.strip()
    if not value:
        raise FormatError("kick-off text is empty")
    ref = now or datetime.now()
    if " " in value:
        date_part, time_part = value.split(" ", 1)
        day = _parse_day_month(date_part, ref.year)
        clock = _parse_time(time_part)
    else:
        day = ref.date()
        clock = _parse_time(value)
    return _ensure_unambiguous_local(datetime.combine(day, clock))


def time_until(kickoff: datetime, now: datetime) -> Tuple[int, int]:
    if kickoff <= now:
        return (0, 0)
    total_minutes = int((kickoff - now).total_seconds() // 60)
    return (total_minutes // 60, total_minutes % 60)
