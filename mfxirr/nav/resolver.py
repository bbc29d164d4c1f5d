# mfxirr/nav/resolver.py
"""
Effective NAV for an arbitrary date.

Rules:
  - dates before the first observation are unresolvable ("below"),
  - a missing date takes the next available observation (forward only),
  - a zero sentinel is skipped in favour of the next day's NAV,
  - running past the last observation is unresolvable ("above").
"""
from __future__ import annotations

from datetime import date, timedelta

from mfxirr.errors import OutOfRangeError
from mfxirr.nav.series import NavSeries

ONE_DAY = timedelta(days=1)

# Legacy "unresolvable" marker returned by get_nav
NAV_UNAVAILABLE = -1.0


def resolve(when: date, series: NavSeries) -> float:
    """
    First non-zero NAV observed on or after `when`.

    Raises OutOfRangeError when `when` precedes the series, or when the
    forward search (gaps and zero sentinels alike) exhausts it.
    """
    first, last = series.first_date, series.last_date
    if when < first:
        raise OutOfRangeError(when, "below", first, last)

    cur = when
    # bounded by the number of days left in the series
    while cur <= last:
        val = series.lookup(cur)
        if val:
            return val
        cur += ONE_DAY
    raise OutOfRangeError(when, "above", first, last)


def get_nav(when: date, series: NavSeries) -> float:
    """resolve() with the legacy sentinel: NAV_UNAVAILABLE instead of raising."""
    try:
        return resolve(when, series)
    except OutOfRangeError:
        return NAV_UNAVAILABLE


__all__ = ["resolve", "get_nav", "NAV_UNAVAILABLE"]
