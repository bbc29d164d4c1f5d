# mfxirr/errors.py
"""
Typed failures for NAV lookup and XIRR solving.

All derive from ValueError so callers that already guard model inputs with
`except ValueError` keep working.
"""
from __future__ import annotations

from datetime import date
from typing import Optional


class MfXirrError(ValueError):
    """Base class for every failure raised by mfxirr."""


class OutOfRangeError(MfXirrError):
    """
    Requested date has no resolvable NAV: it precedes the first observation
    ("below"), or the forward search ran past the last one ("above").
    """

    def __init__(self, when: date, side: str, first: Optional[date] = None, last: Optional[date] = None):
        if side not in ("below", "above"):
            raise ValueError(f"side must be 'below' or 'above', got {side!r}")
        self.date = when
        self.side = side
        self.first = first
        self.last = last
        span = f" [{first} .. {last}]" if first is not None and last is not None else ""
        super().__init__(f"no NAV resolvable for {when} ({side} available range{span})")


class NoRootError(MfXirrError):
    """NPV does not change sign across the search interval."""


class MalformedSeriesError(MfXirrError):
    """NAV series is empty, unsorted, negative-valued or spans a single date."""


class ConfigError(MfXirrError):
    """Scenario configuration failed validation."""


__all__ = [
    "MfXirrError",
    "OutOfRangeError",
    "NoRootError",
    "MalformedSeriesError",
    "ConfigError",
]
