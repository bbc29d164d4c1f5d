# mfxirr/nav/fill.py
"""
Gap filling: one NAV per calendar day between the first and last observation.

Two strategies with identical output:
  fill()              resolve every day of the range independently (default),
  fill_by_insertion() walk the observed dates once, inserting synthetic rows
                      for each gap that carry the next usable value.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import List, Optional, Tuple

from mfxirr.errors import OutOfRangeError
from mfxirr.nav.resolver import resolve
from mfxirr.nav.series import NavSeries

ONE_DAY = timedelta(days=1)


def daily_range(start: date, end: date) -> List[date]:
    n = (end - start).days
    return [start + timedelta(days=i) for i in range(n + 1)]


def _finish(rows: List[Tuple[date, float]], series: NavSeries) -> NavSeries:
    if len(rows) < 2:
        # a filled series needs two days; everything after the first kept day is unresolvable
        raise OutOfRangeError(series.first_date + ONE_DAY * len(rows), "above", series.first_date, series.last_date)
    return NavSeries.from_pairs(rows)


def fill(series: NavSeries) -> NavSeries:
    rows: List[Tuple[date, float]] = []
    for d in daily_range(series.first_date, series.last_date):
        try:
            rows.append((d, resolve(d, series)))
        except OutOfRangeError:
            # only a trailing run of zero sentinels gets here; no later day resolves either
            break
    return _finish(rows, series)


def fill_by_insertion(series: NavSeries) -> NavSeries:
    known = list(dict.fromkeys(series.dates()))

    # effective NAV of each observed date, zero sentinels replaced by the next usable value
    effective: List[Optional[float]] = [None] * len(known)
    carry: Optional[float] = None
    for i in range(len(known) - 1, -1, -1):
        val = series.lookup(known[i])
        if val:
            carry = val
        effective[i] = carry

    rows: List[Tuple[date, float]] = []
    for i, d in enumerate(known):
        if effective[i] is None:
            break
        rows.append((d, effective[i]))
        if i + 1 == len(known) or effective[i + 1] is None:
            continue
        d += ONE_DAY
        while d < known[i + 1]:
            rows.append((d, effective[i + 1]))
            d += ONE_DAY
    return _finish(rows, series)


__all__ = ["fill", "fill_by_insertion", "daily_range"]
