# Helpers to keep one long-lived browser page responsive across scrape cycles.

from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from score_watch.logging_utils import _dbg


async def disable_network_cache(page: Page) -> None:
    """
    Make every reload hit the network so a live page is never served stale.
    Only Chromium exposes CDP sessions; other engines are left as they are.
    """
    ctx = page.context
    new_sess = getattr(ctx, "new_cdp_session", None) if ctx is not None else None
    if not callable(new_sess):
        return
    try:
        sess = await new_sess(page)
        await sess.send("Network.enable")
        await sess.send("Network.setCacheDisabled", {"cacheDisabled": True})
    except PlaywrightError as e:
        _dbg(f"cache not disabled: {e}")


def page_is_usable(page: Optional[Page]) -> bool:
    if page is None:
        return False
    is_closed = getattr(page, "is_closed", None)
    if callable(is_closed) and is_closed():
        return False
    return True
