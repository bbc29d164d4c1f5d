# mfxirr/finance/cashflow.py
"""
Cash-flow vectors for lump-sum and SIP investments in a single fund.

Sign convention (both modes): money put into the fund is positive, the
redemption is negative. XIRR only needs the set to be internally consistent.
"""
from __future__ import annotations

import re
import warnings
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from mfxirr.errors import OutOfRangeError
from mfxirr.nav.resolver import resolve
from mfxirr.nav.series import NavSeries
from mfxirr.utils import safe_div

DEFAULT_NOTIONAL = 1000.0

_FREQ_UNITS = {
    "day": relativedelta(days=1),
    "week": relativedelta(weeks=1),
    "month": relativedelta(months=1),
    "quarter": relativedelta(months=3),
    "year": relativedelta(years=1),
}
_FREQ_RE = re.compile(r"^\s*(\d+)?\s*([a-z]+?)s?\s*$")


@dataclass(frozen=True)
class CashFlow:
    amount: float
    date: date


@dataclass(frozen=True)
class InvestmentFlows:
    cashflows: Tuple[CashFlow, ...]
    units: float
    invested: float
    redeem_date: date
    redeem_nav: float
    redemption_value: float
    skipped: Tuple[date, ...] = field(default=())


def parse_freq(freq: str | int) -> relativedelta:
    """
    "month", "2 weeks", "quarter", "day", "year" ... or a plain number of days.
    """
    if isinstance(freq, int) and not isinstance(freq, bool):
        if freq <= 0:
            raise ValueError(f"frequency must be positive, got {freq}")
        return relativedelta(days=freq)
    m = _FREQ_RE.match(str(freq).lower())
    if not m or m.group(2) not in _FREQ_UNITS:
        raise ValueError(f"unknown frequency {freq!r} (expected day/week/month/quarter/year, optionally 'N units')")
    k = int(m.group(1) or 1)
    if k <= 0:
        raise ValueError(f"frequency must be positive, got {freq!r}")
    return _FREQ_UNITS[m.group(2)] * k


def roll_months(d: date, months: int) -> date:
    """
    Calendar month arithmetic that rolls overflow forward instead of clamping:
    31 Jan + 1 month is 3 Mar (2 Mar in leap years), 29 Feb + 1 year is 1 Mar.
    """
    y, m = divmod(d.month - 1 + int(months), 12)
    return date(d.year + y, m + 1, 1) + timedelta(days=d.day - 1)


def add_years(d: date, years: int) -> date:
    """Calendar-year arithmetic; a 29 Feb start rolls to 1 Mar in non-leap years."""
    if years != int(years):
        raise ValueError(f"years must be a whole number, got {years}")
    return roll_months(d, 12 * int(years))


def sip_end_date(start: date, num_years: float) -> date:
    """SIP horizon: a fixed 365 days per year, not calendar years."""
    return start + timedelta(days=int(round(num_years * 365)))


def schedule(start: date, end: date, freq: str | int) -> List[date]:
    """start, start + freq, start + 2*freq ... up to and including end."""
    step = parse_freq(freq)
    months = step.years * 12 + step.months
    out: List[date] = []
    k = 0
    while True:
        # offset from start each time so month-end starts do not drift
        d = roll_months(start, months * k) if months else start + step * k
        if d > end:
            break
        out.append(d)
        k += 1
    return out


def lumpsum_cashflows(
    invest_date: date,
    inv_years: int,
    series: NavSeries,
    *,
    notional: float = DEFAULT_NOTIONAL,
) -> InvestmentFlows:
    if inv_years <= 0:
        raise ValueError(f"inv_years must be positive, got {inv_years}")
    redeem_date = add_years(invest_date, inv_years)
    invest_nav = resolve(invest_date, series)
    units = notional * safe_div(invest_nav)
    redeem_nav = resolve(redeem_date, series)
    redemption = units * redeem_nav
    flows = (CashFlow(float(notional), invest_date), CashFlow(-redemption, redeem_date))
    return InvestmentFlows(
        cashflows=flows,
        units=units,
        invested=float(notional),
        redeem_date=redeem_date,
        redeem_nav=redeem_nav,
        redemption_value=redemption,
    )


def sip_cashflows(
    installment: float,
    start_date: date,
    num_years: float,
    freq: str | int,
    series: NavSeries,
    *,
    on_missing: str = "raise",
) -> InvestmentFlows:
    """
    One positive flow per installment date, one negative redemption flow at
    start_date + num_years * 365 days for all accumulated units.

    on_missing: "raise" propagates OutOfRangeError for an installment date with
    no resolvable NAV; "skip" drops that installment and warns.
    """
    if on_missing not in ("raise", "skip"):
        raise ValueError(f"on_missing must be 'raise' or 'skip', got {on_missing!r}")
    if num_years <= 0:
        raise ValueError(f"num_years must be positive, got {num_years}")

    end = sip_end_date(start_date, num_years)
    redeem_nav = resolve(end, series)

    flows: List[CashFlow] = []
    skipped: List[date] = []
    units = 0.0
    last_err: Optional[OutOfRangeError] = None
    for d in schedule(start_date, end, freq):
        try:
            nav = resolve(d, series)
        except OutOfRangeError as e:
            if on_missing == "raise":
                raise
            skipped.append(d)
            last_err = e
            continue
        units += installment * safe_div(nav)
        flows.append(CashFlow(float(installment), d))

    if skipped:
        warnings.warn(f"SIP from {start_date}: skipped {len(skipped)} installment(s) with no resolvable NAV")
    if not flows and last_err is not None:
        raise last_err

    redemption = units * redeem_nav
    flows.append(CashFlow(-redemption, end))
    return InvestmentFlows(
        cashflows=tuple(flows),
        units=units,
        invested=float(installment) * (len(flows) - 1),
        redeem_date=end,
        redeem_nav=redeem_nav,
        redemption_value=redemption,
        skipped=tuple(skipped),
    )


__all__ = [
    "CashFlow",
    "InvestmentFlows",
    "DEFAULT_NOTIONAL",
    "parse_freq",
    "roll_months",
    "add_years",
    "sip_end_date",
    "schedule",
    "lumpsum_cashflows",
    "sip_cashflows",
]
