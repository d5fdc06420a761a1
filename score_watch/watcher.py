from __future__ import annotations

import asyncio
import enum
from datetime import datetime
from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional

from playwright.async_api import Page

from score_watch.browser_utils import page_is_usable
from score_watch.config import DEFAULT_REFRESH_S, WatchTiming
from score_watch.error_summary import error_count_parts, scrape_error_code
from score_watch.extractor import get_score
from score_watch.livescore_client.base import PreconditionViolation
from score_watch.logging_utils import _dbg, _log, _warn
from score_watch.snapshot import MatchSnapshot, write_snapshot


class WatchState(enum.Enum):
    RUNNING = "running"
    STOPPED = "stopped"


async def run_cycle(
    page: Page,
    *,
    url: str,
    team_name: str,
    output: Optional[Path],
    timing: WatchTiming,
    now_fn: Optional[Callable[[], datetime]] = None,
) -> MatchSnapshot:
    snapshot = await get_score(page, url, team_name, timing=timing, now_fn=now_fn)
    _log(f"latest match = {snapshot.describe()}")
    if output is not None:
        write_snapshot(output, snapshot)
    return snapshot


async def watch(
    page: Page,
    *,
    url: str,
    team_name: str,
    output: Path,
    refresh_s: float = DEFAULT_REFRESH_S,
    timing: Optional[WatchTiming] = None,
    stop_event: Optional[asyncio.Event] = None,
    exit_on_error: bool = False,
    now_fn: Optional[Callable[[], datetime]] = None,
    reopen: Optional[Callable[[], Awaitable[Page]]] = None,
) -> int:
    """
    Scrape `url` every `refresh_s` seconds until `stop_event` is set.

    A failed cycle leaves `output` untouched and the loop keeps running,
    unless `exit_on_error` is set, in which case the first failure ends
    the loop with exit code 1. When the page gets closed underneath us and
    `reopen` is given, a fresh page from the same browser replaces it.
    """
    t = timing or WatchTiming()
    stop = stop_event or asyncio.Event()
    state = WatchState.RUNNING
    ok = 0
    error_counts: Dict[str, int] = {}
    exit_code = 0

    while state is WatchState.RUNNING:
        try:
            if reopen is not None and not page_is_usable(page):
                _warn("page is closed, opening a new one")
                page = await reopen()
            await run_cycle(page, url=url, team_name=team_name, output=output, timing=t, now_fn=now_fn)
            ok += 1
        except PreconditionViolation as e:
            _warn(f"invariant violated, cycle aborted: {e}")
            error_counts[e.code] = error_counts.get(e.code, 0) + 1
            if exit_on_error:
                exit_code = 1
        except Exception as e:
            code, text = scrape_error_code(e)
            code = code or "scrape_failed"
            _warn(f"got error: {code}: {text}")
            error_counts[code] = error_counts.get(code, 0) + 1
            if exit_on_error:
                exit_code = 1

        if exit_code:
            state = WatchState.STOPPED
            break

        parts = [f"ok={ok}", *error_count_parts(error_counts), f"next={int(refresh_s)}s"]
        _log(" ".join(parts))

        # Stop requests interrupt the refresh sleep immediately.
        if not stop.is_set():
            try:
                await asyncio.wait_for(stop.wait(), timeout=float(refresh_s))
            except asyncio.TimeoutError:
                continue
        _log("exiting the main loop")
        state = WatchState.STOPPED

    _dbg(f"watch stopped: ok={ok} errors={error_counts} exit_code={exit_code}")
    return exit_code
