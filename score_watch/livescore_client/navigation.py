"""Navigation helpers for livescore scraping."""

from __future__ import annotations

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from score_watch.logging_utils import _dbg

from .base import BLANK_URL, NavigationError


async def goto_page(page: Page, url: str, *, timeout_ms: int = 25_000) -> None:
    """
    Navigation helper:
    - try domcontentloaded
    - on failure, retry with wait_until='commit'
    - raise NavigationError when both attempts fail or the server answers >= 400
    """
    last_error: Exception
    for wait_until in ("domcontentloaded", "commit"):
        try:
            resp = await page.goto(url, wait_until=wait_until, timeout=timeout_ms)
        except PlaywrightError as e:
            _dbg(f"goto {url} wait_until={wait_until} failed: {e}")
            last_error = e
            continue
        status = getattr(resp, "status", None) if resp is not None else None
        if isinstance(status, int) and status >= 400:
            raise NavigationError(f"{url} answered HTTP {status}")
        return
    raise NavigationError(f"cannot open {url}: {last_error}")


async def leave_page(page: Page, *, timeout_ms: int = 25_000) -> None:
    try:
        await page.goto(BLANK_URL, timeout=timeout_ms)
    except PlaywrightError as e:
        raise NavigationError(f"cannot navigate to {BLANK_URL}: {e}") from e


async def leave_page_quietly(page: Page, *, timeout_ms: int = 25_000) -> None:
    try:
        await leave_page(page, timeout_ms=timeout_ms)
    except NavigationError as e:
        _dbg(f"leave page after failed cycle: {e}")
