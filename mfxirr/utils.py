# mfxirr/utils.py
"""Small pure helpers shared by the loaders and simulators."""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Optional, Sized


def compose(f: Callable[..., Any], g: Callable[..., Any]) -> Callable[..., Any]:
    """compose(f, g)(x) == f(g(x))"""
    return lambda *a, **kw: f(g(*a, **kw))


def _as_float(v: Any, default: Optional[float] = None) -> Optional[float]:
    try:
        return float(v) if v is not None else default
    except (TypeError, ValueError):
        return default


# str() first so numpy scalars, Decimals and strings with commas all go through one path
to_double = compose(lambda s: _as_float(s.replace(",", "").strip(), 0.0), str)


def safe_div(b: float) -> float:
    """1 / b, or 0.0 when b is zero."""
    b = float(b)
    if b == 0.0:
        return 0.0
    return 1.0 / b


def is_empty(x: Optional[Sized]) -> bool:
    return x is None or len(x) == 0


def as_date(v: Any, fmt: Optional[str] = None) -> date:
    """
    Coerce YAML/CLI input into a datetime.date.
    Accepts date, datetime, pandas Timestamp, or a string (ISO unless `fmt`).
    """
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if hasattr(v, "to_pydatetime"):
        return v.to_pydatetime().date()
    if isinstance(v, str):
        s = v.strip()
        if fmt:
            return datetime.strptime(s, fmt).date()
        return date.fromisoformat(s)
    raise ValueError(f"cannot interpret {v!r} as a date")
