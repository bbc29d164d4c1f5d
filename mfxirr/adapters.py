# mfxirr/adapters.py
"""
Investment scenarios on a single NAV series.

  lumpsum_irr / sip_irr          -> one annualized rate
  run_lumpsum / run_sip          -> summary mapping (rate + units, values, dates)
  rolling_lumpsum_irr / _sip_irr -> one rate per start date, as a DataFrame

Pure functions: nothing here mutates the series or keeps state between calls.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, List

import numpy as np
import pandas as pd

from mfxirr.errors import MfXirrError
from mfxirr.finance.cashflow import (
    DEFAULT_NOTIONAL,
    InvestmentFlows,
    lumpsum_cashflows,
    schedule,
    sip_cashflows,
)
from mfxirr.finance.irr import xirr
from mfxirr.nav.series import NavSeries


def lumpsum_irr(
    invest_date: date,
    inv_years: int,
    series: NavSeries,
    *,
    notional: float = DEFAULT_NOTIONAL,
) -> float:
    """Rate earned by investing `notional` on invest_date and redeeming inv_years calendar years later."""
    flows = lumpsum_cashflows(invest_date, inv_years, series, notional=notional)
    return xirr(flows.cashflows)


def sip_irr(
    installment: float,
    start_date: date,
    num_years: float,
    freq: str | int,
    series: NavSeries,
    *,
    on_missing: str = "raise",
) -> float:
    """Rate earned by a fixed installment every `freq`, redeemed after num_years * 365 days."""
    flows = sip_cashflows(installment, start_date, num_years, freq, series, on_missing=on_missing)
    return xirr(flows.cashflows)


def _summary(kind: str, flows: InvestmentFlows, rate: float) -> Dict[str, Any]:
    return {
        "kind": kind,
        "irr": rate,
        "irr_pct": rate * 100.0,
        "invested": flows.invested,
        "units": flows.units,
        "redeem_date": flows.redeem_date.isoformat(),
        "redeem_nav": flows.redeem_nav,
        "redemption_value": flows.redemption_value,
        "installments": len(flows.cashflows) - 1,
        "skipped": len(flows.skipped),
    }


def run_lumpsum(
    invest_date: date,
    inv_years: int,
    series: NavSeries,
    *,
    notional: float = DEFAULT_NOTIONAL,
) -> Dict[str, Any]:
    flows = lumpsum_cashflows(invest_date, inv_years, series, notional=notional)
    out = _summary("lumpsum", flows, xirr(flows.cashflows))
    out.update({"start_date": invest_date.isoformat(), "years": inv_years})
    return out


def run_sip(
    installment: float,
    start_date: date,
    num_years: float,
    freq: str | int,
    series: NavSeries,
    *,
    on_missing: str = "raise",
) -> Dict[str, Any]:
    flows = sip_cashflows(installment, start_date, num_years, freq, series, on_missing=on_missing)
    out = _summary("sip", flows, xirr(flows.cashflows))
    out.update({"start_date": start_date.isoformat(), "years": num_years, "freq": str(freq)})
    return out


def _rolling(starts: List[date], compute) -> pd.DataFrame:
    rows: List[Dict[str, Any]] = []
    for d in starts:
        try:
            rows.append({"start_date": d, "irr": compute(d), "error": None})
        except MfXirrError as e:
            rows.append({"start_date": d, "irr": np.nan, "error": str(e)})
    return pd.DataFrame(rows, columns=["start_date", "irr", "error"])


def rolling_lumpsum_irr(
    series: NavSeries,
    first_start: date,
    last_start: date,
    inv_years: int,
    *,
    step: str | int = "month",
    notional: float = DEFAULT_NOTIONAL,
) -> pd.DataFrame:
    """
    Lump-sum IRR for every start date first_start, first_start + step, ...
    up to last_start. Unresolvable starts get irr=NaN and the failure message.
    """
    starts = schedule(first_start, last_start, step)
    return _rolling(starts, lambda d: lumpsum_irr(d, inv_years, series, notional=notional))


def rolling_sip_irr(
    series: NavSeries,
    first_start: date,
    last_start: date,
    installment: float,
    num_years: float,
    freq: str | int = "month",
    *,
    step: str | int = "month",
    on_missing: str = "raise",
) -> pd.DataFrame:
    starts = schedule(first_start, last_start, step)
    return _rolling(
        starts,
        lambda d: sip_irr(installment, d, num_years, freq, series, on_missing=on_missing),
    )


__all__ = [
    "lumpsum_irr",
    "sip_irr",
    "run_lumpsum",
    "run_sip",
    "rolling_lumpsum_irr",
    "rolling_sip_irr",
]
