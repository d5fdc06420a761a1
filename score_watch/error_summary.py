from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from score_watch.livescore_client.base import ScrapeError


def scrape_error_code(ex: BaseException) -> Tuple[Optional[str], str]:
    """
    Split an error into (code, human text). Non-scrape errors get code "unexpected".
    """
    if not isinstance(ex, ScrapeError):
        return "unexpected", f"{type(ex).__name__}: {ex}".strip()
    code = ex.code or None
    ex_text = str(ex or "").strip()
    ex_text = re.sub(r"\bcode=[a-z0-9_]+\b\s*", "", ex_text, flags=re.I).strip()
    ex_text = re.sub(r"\s{2,}", " ", ex_text).strip()
    return code, ex_text


def error_count_parts(
    error_counts: Dict[str, int],
    *,
    code_limit: int = 4,
) -> List[str]:
    parts: List[str] = []
    total = sum(int(v or 0) for v in error_counts.values())
    parts.append(f"errors={total}")
    code_parts = sorted(
        ((k, int(v)) for k, v in error_counts.items() if int(v or 0) > 0),
        key=lambda kv: kv[1],
        reverse=True,
    )
    if code_parts:
        top = ", ".join(f"{k}={v}" for k, v in code_parts[: max(1, int(code_limit))])
        parts.append(f"codes[{top}]")
    return parts
