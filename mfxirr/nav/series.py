# mfxirr/nav/series.py
"""
Immutable, date-indexed NAV observations.

A value of 0.0 is a zero sentinel ("NAV not actually published"), not a real
valuation; the resolver skips over it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from mfxirr.errors import MalformedSeriesError
from mfxirr.utils import is_empty


@dataclass(frozen=True)
class NavObservation:
    date: date
    value: float


@dataclass(frozen=True)
class NavSeries:
    observations: Tuple[NavObservation, ...]
    # first occurrence of each date; built once in __post_init__
    _index: Dict[date, float] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        obs = tuple(self.observations)
        _check(obs)
        index: Dict[date, float] = {}
        for o in obs:
            index.setdefault(o.date, o.value)
        object.__setattr__(self, "observations", obs)
        object.__setattr__(self, "_index", index)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[date, float]]) -> "NavSeries":
        return cls(tuple(NavObservation(d, float(v)) for d, v in pairs))

    @property
    def first_date(self) -> date:
        return self.observations[0].date

    @property
    def last_date(self) -> date:
        return self.observations[-1].date

    def lookup(self, when: date) -> Optional[float]:
        """Raw value recorded for `when` (first occurrence), or None."""
        return self._index.get(when)

    def dates(self) -> List[date]:
        return [o.date for o in self.observations]

    def values(self) -> List[float]:
        return [o.value for o in self.observations]

    def pairs(self) -> List[Tuple[date, float]]:
        return [(o.date, o.value) for o in self.observations]

    def __getitem__(self, when: date) -> float:
        val = self._index.get(when)
        if val is None:
            raise KeyError(when)
        return val

    def __contains__(self, when: object) -> bool:
        return when in self._index

    def __len__(self) -> int:
        return len(self.observations)

    def __iter__(self) -> Iterator[NavObservation]:
        return iter(self.observations)


def _check(obs: Tuple[NavObservation, ...]) -> None:
    if is_empty(obs):
        raise MalformedSeriesError("NAV series is empty")
    prev: Optional[date] = None
    for i, o in enumerate(obs):
        if o.value != o.value or o.value < 0:  # NaN or negative
            raise MalformedSeriesError(f"row {i}: NAV must be >= 0, got {o.value} on {o.date}")
        if prev is not None and o.date < prev:
            raise MalformedSeriesError(f"row {i}: dates not in ascending order ({o.date} after {prev})")
        prev = o.date
    if obs[0].date == obs[-1].date:
        raise MalformedSeriesError("NAV series needs at least two distinct dates")


__all__ = ["NavObservation", "NavSeries"]
