from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Callable, Optional, Tuple

from playwright.async_api import Page

from score_watch.config import WatchTiming
from score_watch.game_time import classify_game_time
from score_watch.livescore_client.base import (
    AWAY_SCORE_SELECTOR,
    AWAY_TEAM_SELECTOR,
    ELAPSED_SELECTOR,
    HOME_SCORE_SELECTOR,
    HOME_TEAM_SELECTOR,
    KICKOFF_SELECTOR,
    PERIOD_PART_SELECTOR,
    FieldReadError,
    NotFound,
)
from score_watch.livescore_client.navigation import goto_page, leave_page, leave_page_quietly
from score_watch.livescore_client.overlays import dismiss_consent
from score_watch.livescore_client.rows import (
    locate_latest_match_row,
    parse_score,
    read_all_texts,
    read_optional_text,
    read_required_attribute,
    read_required_text,
)
from score_watch.logging_utils import _log_step
from score_watch.snapshot import MatchSnapshot


def _local_now() -> datetime:
    return datetime.now().astimezone()


def is_my_team(page_name: str, team_name: str) -> bool:
    """
    Case-sensitive prefix match in either direction, so both
    "Alpha" ~ "Alpha FC" and "Alpha FC Women" ~ "Alpha FC" hold.
    """
    if not page_name or not team_name:
        return False
    return page_name.startswith(team_name) or team_name.startswith(page_name)


def pick_sides(
    team_name: str,
    home: Tuple[str, int],
    away: Tuple[str, int],
) -> Tuple[Tuple[str, int], Tuple[str, int]]:
    """
    Returns ((my_team, my_score), (opponent, opponent_score)).
    The home side wins when both names match.
    """
    if is_my_team(home[0], team_name):
        return home, away
    if is_my_team(away[0], team_name):
        return away, home
    raise FieldReadError(
        f"team {team_name!r} matches neither {home[0]!r} nor {away[0]!r}",
        code="team_not_found",
    )


async def _scrape(
    page: Page,
    url: str,
    team_name: str,
    *,
    timing: WatchTiming,
    now_fn: Callable[[], datetime],
) -> MatchSnapshot:
    _log_step(f"goto {url}")
    await goto_page(page, url, timeout_ms=timing.nav_timeout_ms)
    # Wait for a reasonable time before we inspect DOM.
    await asyncio.sleep(timing.settle_ms / 1000.0)
    await dismiss_consent(page)

    row = await locate_latest_match_row(
        page,
        attempts=timing.locate_attempts,
        delay_ms=timing.locate_delay_ms,
    )
    if row is None:
        raise NotFound(f"no match row after {timing.locate_attempts} attempts")

    home_team = await read_required_text(row, HOME_TEAM_SELECTOR)
    away_team = await read_required_text(row, AWAY_TEAM_SELECTOR)
    home_score = parse_score(await read_optional_text(row, HOME_SCORE_SELECTOR))
    away_score = parse_score(await read_optional_text(row, AWAY_SCORE_SELECTOR))
    status_tag = await read_required_attribute(row, "class")
    _log_step(f"row: {home_team} {home_score}:{away_score} {away_team} class={status_tag!r}")

    kickoff_text = await read_optional_text(row, KICKOFF_SELECTOR)
    elapsed_text = await read_optional_text(row, ELAPSED_SELECTOR)
    period_texts = await read_all_texts(row, PERIOD_PART_SELECTOR)

    game_time = classify_game_time(
        status_tag,
        period_texts=period_texts,
        elapsed_text=elapsed_text,
        kickoff_text=kickoff_text,
        now=now_fn().replace(tzinfo=None),
        period_minutes=timing.period_minutes,
    )

    (my_team, my_score), (opponent, opponent_score) = pick_sides(
        team_name,
        (home_team, home_score),
        (away_team, away_score),
    )
    return MatchSnapshot(
        my_team=my_team,
        my_team_score=my_score,
        opponent_team=opponent,
        opponent_team_score=opponent_score,
        game_time=game_time,
        generated=now_fn(),
    )


async def get_score(
    page: Page,
    url: str,
    team_name: str,
    *,
    timing: Optional[WatchTiming] = None,
    now_fn: Optional[Callable[[], datetime]] = None,
) -> MatchSnapshot:
    """
    One scrape cycle: open `url`, read the most recent match row, classify it,
    and leave the page on about:blank again.
    """
    t = timing or WatchTiming()
    clock = now_fn or _local_now
    try:
        snapshot = await _scrape(page, url, team_name, timing=t, now_fn=clock)
    except Exception:
        await leave_page_quietly(page, timeout_ms=t.nav_timeout_ms)
        raise
    await leave_page(page, timeout_ms=t.nav_timeout_ms)
    return snapshot
