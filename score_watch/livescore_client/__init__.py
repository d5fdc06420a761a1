"""Livescore page access helpers (navigation, overlays, match rows)."""

from .base import (  # noqa: F401
    FieldReadError,
    FormatError,
    NavigationError,
    NotFound,
    PreconditionViolation,
    ScrapeError,
)
