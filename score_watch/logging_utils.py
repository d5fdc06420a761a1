"""Console logging helpers."""

from __future__ import annotations

import os
import sys
import time

_TRUTHY = ("1", "true", "yes")


def _dbg(msg: str) -> None:
    if os.getenv("SCOREWATCH_DEBUG") in _TRUTHY:
        print(f"[debug] {msg}", flush=True)


def _log_step(msg: str) -> None:
    """
    Verbose per-step logging for a scrape cycle.
    Enabled when SCOREWATCH_PROGRESS or SCOREWATCH_DEBUG is set.
    """
    if os.getenv("SCOREWATCH_PROGRESS") in _TRUTHY or os.getenv("SCOREWATCH_DEBUG") in _TRUTHY:
        print(f"[progress] {msg}", flush=True)


def _log(msg: str, *, tag: str = "watch") -> None:
    now = time.strftime("%H:%M:%S")
    print(f"[{tag} {now}] {msg}", flush=True)


def _warn(msg: str) -> None:
    print(f"[error] {msg}", file=sys.stderr, flush=True)
