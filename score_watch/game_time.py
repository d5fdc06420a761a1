from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Optional, Tuple, Union

from score_watch.config import PERIOD_MINUTES
from score_watch.kickoff import parse_kickoff, time_until
from score_watch.livescore_client.base import LIVE_MARKER, SCHEDULED_MARKER, FormatError, PreconditionViolation
from score_watch.logging_utils import _dbg


@dataclass(frozen=True)
class Scheduled:
    time_until: Optional[Tuple[int, int]]  # (hours, minutes); None when kick-off text is unreadable

    def to_json(self) -> Any:
        return {"WillBePlayed": list(self.time_until) if self.time_until is not None else None}


@dataclass(frozen=True)
class Live:
    minute: int

    def to_json(self) -> Any:
        return {"Playing": self.minute}


@dataclass(frozen=True)
class Break:
    minute: int  # end of the period just completed

    def to_json(self) -> Any:
        return {"BreakAfter": self.minute}


@dataclass(frozen=True)
class Finished:
    def to_json(self) -> Any:
        return "Played"


GameTime = Union[Scheduled, Live, Break, Finished]


_ELAPSED_RE = re.compile(r"(\d{1,3})\s*['’]?", re.ASCII)


def is_live_tag(status_tag: str) -> bool:
    return LIVE_MARKER in (status_tag or "")


def is_scheduled_tag(status_tag: str) -> bool:
    return SCHEDULED_MARKER in (status_tag or "")


def count_completed_periods(period_texts: Iterable[Optional[str]]) -> int:
    return sum(1 for t in period_texts if (t or "").strip())


def parse_elapsed(text: Optional[str]) -> Optional[int]:
    """
    "12'" -> 12, "7" -> 7; anything else (e.g. "Break", "") -> None.
    """
    if text is None:
        return None
    m = _ELAPSED_RE.fullmatch(text.strip())
    if not m:
        return None
    return int(m.group(1))


def scheduled_game_time(kickoff_text: Optional[str], *, now: Optional[datetime] = None) -> Scheduled:
    ref = now or datetime.now()
    if kickoff_text is None:
        return Scheduled(None)
    try:
        kickoff = parse_kickoff(kickoff_text, now=ref)
    except FormatError as e:
        _dbg(f"kick-off not parsed: {e}")
        return Scheduled(None)
    _dbg(f"match will be played: {kickoff.isoformat(sep=' ')}")
    return Scheduled(time_until(kickoff, ref))


def live_game_time(
    completed_periods: int,
    elapsed_text: Optional[str],
    *,
    period_minutes: int = PERIOD_MINUTES,
) -> Union[Live, Break]:
    if completed_periods < 1:
        raise PreconditionViolation(f"live match with {completed_periods} completed periods")
    minute = period_minutes * (completed_periods - 1)
    elapsed = parse_elapsed(elapsed_text)
    if elapsed is not None:
        return Live(minute + elapsed)
    # No running clock: the current period has just ended.
    return Break(minute + period_minutes)


def classify_game_time(
    status_tag: str,
    *,
    period_texts: Iterable[Optional[str]] = (),
    elapsed_text: Optional[str] = None,
    kickoff_text: Optional[str] = None,
    now: Optional[datetime] = None,
    period_minutes: int = PERIOD_MINUTES,
) -> GameTime:
    if is_live_tag(status_tag):
        return live_game_time(
            count_completed_periods(period_texts),
            elapsed_text,
            period_minutes=period_minutes,
        )
    if is_scheduled_tag(status_tag):
        return scheduled_game_time(kickoff_text, now=now)
    return Finished()
