"""Overlay/consent handling helpers."""

from __future__ import annotations

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from score_watch.logging_utils import _dbg

# OneTrust banner used by flashscore-family pages.
_CONSENT_BUTTONS = (
    "#onetrust-accept-btn-handler",
    "#onetrust-reject-all-handler",
)


async def dismiss_consent(page: Page) -> bool:
    """
    Click away a cookie-consent banner if one is visible.
    The banner does not hide the match rows, so failing here never fails the cycle.
    """
    for sel in _CONSENT_BUTTONS:
        try:
            btn = await page.query_selector(sel)
            if btn is None or not (await btn.is_visible()):
                continue
            await btn.click(timeout=2000)
            _dbg(f"consent dismissed via {sel}")
            return True
        except PlaywrightError as e:
            _dbg(f"consent button {sel}: {e}")
    return False
