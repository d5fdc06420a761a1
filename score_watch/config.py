from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

# One third of a 60 minute match.
PERIOD_MINUTES = 20

DEFAULT_REFRESH_S = 30


@dataclass(frozen=True)
class WatchTiming:
    period_minutes: int = PERIOD_MINUTES
    locate_attempts: int = 10
    locate_delay_ms: int = 200
    settle_ms: int = 500
    nav_timeout_ms: int = 25_000


def _env_int(name: str, default: int, *, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    if value < minimum:
        return default
    return value


def resolve_timing(base: Optional[WatchTiming] = None) -> WatchTiming:
    """
    Apply SCOREWATCH_* environment overrides on top of `base` (or the defaults).
    The period length is a domain constant and is not read from the environment.
    """
    b = base or WatchTiming()
    return WatchTiming(
        period_minutes=b.period_minutes,
        locate_attempts=_env_int("SCOREWATCH_LOCATE_ATTEMPTS", b.locate_attempts, minimum=1),
        locate_delay_ms=_env_int("SCOREWATCH_LOCATE_DELAY_MS", b.locate_delay_ms),
        settle_ms=_env_int("SCOREWATCH_SETTLE_MS", b.settle_ms),
        nav_timeout_ms=_env_int("SCOREWATCH_NAV_TIMEOUT_MS", b.nav_timeout_ms, minimum=1),
    )


def resolve_refresh_s(default: int = DEFAULT_REFRESH_S) -> int:
    return _env_int("SCOREWATCH_REFRESH", default, minimum=1)
