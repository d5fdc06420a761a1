"""Match-row discovery and field reads."""

from __future__ import annotations

import asyncio
import re
from typing import List, Optional

from playwright.async_api import ElementHandle, Page
from playwright.async_api import Error as PlaywrightError

from score_watch.logging_utils import _dbg

from .base import MATCH_ROW_SELECTOR, FieldReadError

_SCORE_RE = re.compile(r"\d{1,4}", re.ASCII)


async def locate_latest_match_row(
    page: Page,
    *,
    selector: str = MATCH_ROW_SELECTOR,
    attempts: int = 10,
    delay_ms: int = 200,
) -> Optional[ElementHandle]:
    """
    Poll for match rows while the page is still hydrating.
    Returns the first (most recent) row, or None once the attempt budget is spent.
    """
    for attempt in range(1, max(1, int(attempts)) + 1):
        await asyncio.sleep(max(0, delay_ms) / 1000.0)
        try:
            rows = await page.query_selector_all(selector)
        except PlaywrightError as e:
            raise FieldReadError(f"query {selector} failed: {e}") from e
        if rows:
            _dbg(f"{selector}: {len(rows)} rows on attempt {attempt}")
            return rows[0]
        _dbg(f"{selector}: nothing yet (attempt {attempt}/{attempts})")
    return None


async def read_optional_text(row: ElementHandle, selector: str) -> Optional[str]:
    try:
        el = await row.query_selector(selector)
        if el is None:
            return None
        return (await el.inner_text()).strip()
    except PlaywrightError as e:
        raise FieldReadError(f"read {selector} failed: {e}") from e


async def read_required_text(row: ElementHandle, selector: str) -> str:
    text = await read_optional_text(row, selector)
    if not text:
        raise FieldReadError(f"{selector} is missing or empty")
    return text


async def read_all_texts(row: ElementHandle, selector: str) -> List[Optional[str]]:
    """
    Texts of every element matching `selector`; an element whose text
    cannot be read counts as empty.
    """
    try:
        els = await row.query_selector_all(selector)
    except PlaywrightError as e:
        raise FieldReadError(f"query {selector} failed: {e}") from e
    out: List[Optional[str]] = []
    for el in els:
        try:
            out.append(await el.inner_text())
        except PlaywrightError as e:
            _dbg(f"{selector}: unreadable part ({e})")
            out.append(None)
    return out


async def read_required_attribute(row: ElementHandle, name: str) -> str:
    try:
        value = await row.get_attribute(name)
    except PlaywrightError as e:
        raise FieldReadError(f"attribute {name} read failed: {e}") from e
    if not value:
        raise FieldReadError(f"attribute {name} should not be empty")
    return value


def parse_score(text: Optional[str]) -> int:
    """
    Lenient score parse: anything but a plain non-negative integer becomes 0.
    """
    s = (text or "").strip()
    if _SCORE_RE.fullmatch(s):
        return int(s)
    if s:
        _dbg(f"score {s!r} is not a number, using 0")
    return 0
