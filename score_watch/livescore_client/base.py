"""Base livescore page constants and scrape errors."""

from __future__ import annotations

import re
from typing import Optional

BLANK_URL = "about:blank"

MATCH_ROW_SELECTOR = ".event__match"
HOME_TEAM_SELECTOR = ".event__participant--home"
AWAY_TEAM_SELECTOR = ".event__participant--away"
HOME_SCORE_SELECTOR = ".event__score--home"
AWAY_SCORE_SELECTOR = ".event__score--away"
KICKOFF_SELECTOR = ".event__time"
ELAPSED_SELECTOR = ".eventTime"
PERIOD_PART_SELECTOR = ".event__part--home"

LIVE_MARKER = "event__match--live"
SCHEDULED_MARKER = "event__match--scheduled"


_URL_RE = re.compile(r"^https?://[^/\s?#]+(?:[/?#]\S*)?$", re.I)


class ScrapeError(RuntimeError):
    code = "scrape_failed"

    def __init__(self, message: str = "", *, code: Optional[str] = None):
        super().__init__(message)
        if code:
            self.code = code

    def __str__(self) -> str:
        msg = super().__str__()
        return f"code={self.code} {msg}".strip()


class NavigationError(ScrapeError):
    code = "navigation_failed"


class NotFound(ScrapeError):
    code = "row_not_found"


class FieldReadError(ScrapeError):
    code = "field_missing"


class FormatError(ScrapeError):
    code = "bad_format"


class PreconditionViolation(ScrapeError):
    code = "invariant_violated"


def is_livescore_url(url: str) -> bool:
    return bool(_URL_RE.match((url or "").strip()))


def normalize_livescore_url(url: str) -> str:
    """
    Strip whitespace and reject anything that is not an absolute http(s) URL.
    """
    raw = (url or "").strip()
    if not is_livescore_url(raw):
        raise ValueError(f"not an absolute http(s) URL: {url!r}")
    return raw
