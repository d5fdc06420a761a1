from __future__ import annotations

import argparse
import asyncio
import json
import signal
from pathlib import Path
from typing import List, Optional

from playwright.async_api import async_playwright

from score_watch.browser_utils import disable_network_cache
from score_watch.config import resolve_refresh_s, resolve_timing
from score_watch.driver_process import DRIVERS, kill_previous_browsers
from score_watch.error_summary import scrape_error_code
from score_watch.extractor import get_score
from score_watch.livescore_client.base import ScrapeError, normalize_livescore_url
from score_watch.logging_utils import _dbg, _log, _warn
from score_watch.snapshot import write_snapshot
from score_watch.watcher import watch


async def _with_browser(driver: str, headless: bool, fn):
    async with async_playwright() as p:
        engine = p.firefox if driver == "firefox" else p.chromium
        launch_args = []
        if driver != "firefox":
            launch_args = ["--disable-dev-shm-usage", "--no-default-browser-check"]
        browser = await engine.launch(headless=headless, args=launch_args)
        try:
            context = await browser.new_context(viewport={"width": 1440, "height": 900})
            context.set_default_timeout(15_000)
            context.set_default_navigation_timeout(25_000)
            page = await context.new_page()
            await disable_network_cache(page)
            return await fn(page)
        finally:
            await browser.close()


def _install_stop_signals(stop_event: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except (NotImplementedError, RuntimeError):
            # Windows event loops: Ctrl+C surfaces as KeyboardInterrupt instead.
            _dbg(f"signal handler for {sig!r} not supported here")


async def cmd_watch(
    url: str,
    team_name: str,
    output: Path,
    *,
    driver: str,
    refresh_s: int,
    exit_on_error: bool,
    headless: bool,
) -> int:
    timing = resolve_timing()

    async def run(page):
        stop_event = asyncio.Event()
        _install_stop_signals(stop_event)

        async def reopen():
            return await page.context.new_page()

        print("Press Ctrl+C to stop.", flush=True)
        return await watch(
            page,
            url=url,
            team_name=team_name,
            output=output,
            refresh_s=refresh_s,
            timing=timing,
            stop_event=stop_event,
            exit_on_error=exit_on_error,
            reopen=reopen,
        )

    return await _with_browser(driver, headless, run)


async def cmd_once(
    url: str,
    team_name: str,
    output: Optional[Path],
    *,
    driver: str,
    headless: bool,
) -> int:
    timing = resolve_timing()

    async def run(page):
        try:
            snapshot = await get_score(page, url, team_name, timing=timing)
        except ScrapeError as e:
            code, text = scrape_error_code(e)
            _warn(f"{code}: {text}")
            return 1
        print(json.dumps(snapshot.to_json(), ensure_ascii=False, indent=2), flush=True)
        if output is not None:
            write_snapshot(output, snapshot)
        return 0

    return await _with_browser(driver, headless, run)


def _url_arg(value: str) -> str:
    try:
        return normalize_livescore_url(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1: {n}")
    return n


def _add_target_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("url", type=_url_arg, help="Livescore URL of the team")
    p.add_argument("team_name", help="Team name (prefix match against the names on the page)")
    p.add_argument("--driver", choices=list(DRIVERS), default="chromium", help="Browser engine")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="score-watch")
    parser.add_argument("--headed", action="store_true", help="Run with visible browser window")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_watch = sub.add_parser("watch", help="Scrape the latest match periodically and keep a JSON snapshot")
    _add_target_args(p_watch)
    p_watch.add_argument("output", type=Path, help="JSON output file (overwritten every cycle)")
    p_watch.add_argument("-r", "--refresh", type=_positive_int, default=resolve_refresh_s(), help="Refresh interval in seconds")
    p_watch.add_argument("-k", "--kill-previous", action="store_true", help="Kill browser processes left by an earlier run")
    p_watch.add_argument("--exit-on-error", action="store_true", help="Stop with exit code 1 on the first failed cycle")

    p_once = sub.add_parser("once", help="Scrape the latest match once and print it")
    _add_target_args(p_once)
    p_once.add_argument("--output", type=Path, default=None, help="Also write the JSON snapshot here")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    headless = not args.headed

    try:
        if args.cmd == "watch":
            if args.kill_previous:
                n = kill_previous_browsers(args.driver)
                _log(f"killed {n} leftover {args.driver} processes")
            return asyncio.run(
                cmd_watch(
                    args.url,
                    args.team_name,
                    args.output,
                    driver=args.driver,
                    refresh_s=args.refresh,
                    exit_on_error=args.exit_on_error,
                    headless=headless,
                )
            )
        if args.cmd == "once":
            return asyncio.run(
                cmd_once(args.url, args.team_name, args.output, driver=args.driver, headless=headless)
            )
    except KeyboardInterrupt:
        _log("interrupted")
        return 0
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
