# mfxirr/finance/irr.py
"""
Date-aware NPV/XIRR.

Convention: every cash flow is compounded *forward* to the latest date in the
set, i.e.

    NPV(r) = sum_i CF[i] * (1 + r) ** ((last_date - date[i]) / 365)

which has the same roots as the usual "discount to the first date" form but
stays finite at r = -1. Actual/365 day count.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np
from scipy.optimize import brentq

from mfxirr.errors import NoRootError
from mfxirr.finance.cashflow import CashFlow

DAYS_PER_YEAR = 365.0

# Search domain: -100% .. +1000% per annum
RATE_LO = -1.0
RATE_HI = 10.0


def days_from_last(cashflows: Sequence[CashFlow]) -> np.ndarray:
    last = max(cf.date for cf in cashflows)
    return np.array([(last - cf.date).days for cf in cashflows], dtype=float)


def xnpv(rate: float, amounts: Sequence[float], days: Sequence[float]) -> float:
    """NPV(r) on pre-computed day offsets (days before the last cash flow)."""
    a = np.asarray(amounts, dtype=float)
    n = np.asarray(days, dtype=float)
    return float(np.sum(a * np.power(1.0 + float(rate), n / DAYS_PER_YEAR)))


def npv(rate: float, cashflows: Sequence[CashFlow]) -> float:
    if not cashflows:
        return 0.0
    return xnpv(rate, [cf.amount for cf in cashflows], days_from_last(cashflows))


def xirr(
    cashflows: Sequence[CashFlow],
    *,
    lo: float = RATE_LO,
    hi: float = RATE_HI,
    xtol: float = 1e-10,
    maxiter: int = 200,
) -> float:
    """
    Annualized rate r with NPV(r) == 0, bracketed in [lo, hi] and solved with
    Brent's method. Returns a decimal rate (0.12 = 12%).

    Raises NoRootError when NPV has the same sign at both ends of the bracket.
    """
    if len(cashflows) < 2:
        raise NoRootError(f"need at least two cash flows, got {len(cashflows)}")

    amounts = np.array([cf.amount for cf in cashflows], dtype=float)
    days = days_from_last(cashflows)

    def f(r: float) -> float:
        return xnpv(r, amounts, days)

    f_lo, f_hi = f(lo), f(hi)
    if f_lo == 0.0:
        return lo
    if f_hi == 0.0:
        return hi
    if np.sign(f_lo) == np.sign(f_hi):
        raise NoRootError(
            f"NPV does not change sign on [{lo}, {hi}]: NPV({lo})={f_lo:.6g}, NPV({hi})={f_hi:.6g}"
        )

    try:
        root = brentq(f, lo, hi, xtol=xtol, maxiter=maxiter)
    except RuntimeError as e:
        raise NoRootError(f"root finding did not converge: {e}") from e
    return float(root)


__all__ = ["xirr", "npv", "xnpv", "days_from_last", "RATE_LO", "RATE_HI"]
