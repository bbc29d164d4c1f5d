# mfxirr/loaders.py
"""
NAV history tables on disk <-> NavSeries.

Expected CSV layout is the AMFI NAV-history export:

    Net Asset Value,Repurchase Price,Sale Price,Date
    10.2345,,,04-Jan-2010

Header names are de-spaced ("Net Asset Value" -> "NetAssetValue"); the price
columns are dropped. Unparseable NAVs become 0.0, the zero sentinel the
resolver already skips.
"""
from __future__ import annotations

import io
import os
from typing import Optional

import pandas as pd

from mfxirr.errors import MalformedSeriesError
from mfxirr.nav.series import NavObservation, NavSeries

DATE_COL = "Date"
NAV_COL = "NetAssetValue"
AMFI_DATE_FORMAT = "%d-%b-%Y"
_DROP_COLS = ("RepurchasePrice", "SalePrice")


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.rename(columns={c: str(c).replace(" ", "") for c in df.columns})
    keep = [c for c in df.columns if c not in _DROP_COLS]
    return df[keep]


def read_nav_frame(
    source: str | os.PathLike | io.StringIO,
    *,
    date_format: Optional[str] = AMFI_DATE_FORMAT,
) -> pd.DataFrame:
    """Read a NAV CSV into a two-column (Date, NetAssetValue) frame sorted by date."""
    raw = pd.read_csv(source, dtype=str, skipinitialspace=True)
    df = _normalize_columns(raw)
    missing = [c for c in (DATE_COL, NAV_COL) if c not in df.columns]
    if missing:
        raise MalformedSeriesError(f"NAV table missing column(s): {missing}; got {list(df.columns)}")

    nav = pd.to_numeric(df[NAV_COL].str.replace(",", "", regex=False), errors="coerce").fillna(0.0)
    try:
        dates = pd.to_datetime(df[DATE_COL].str.strip(), format=date_format)
    except (ValueError, TypeError) as e:
        raise MalformedSeriesError(f"unparseable dates in NAV table: {e}") from e

    out = pd.DataFrame({DATE_COL: dates.dt.date, NAV_COL: nav.astype(float)})
    # stable sort keeps "first occurrence wins" for duplicate dates
    return out.sort_values(DATE_COL, kind="mergesort").reset_index(drop=True)


def series_from_frame(df: pd.DataFrame) -> NavSeries:
    """Frame with Date/NetAssetValue columns -> validated NavSeries."""
    if df.empty:
        raise MalformedSeriesError("NAV table has no rows")
    obs = tuple(
        NavObservation(pd.Timestamp(d).date(), float(v))
        for d, v in zip(df[DATE_COL], df[NAV_COL])
    )
    return NavSeries(obs)


def series_to_frame(series: NavSeries) -> pd.DataFrame:
    return pd.DataFrame(series.pairs(), columns=[DATE_COL, NAV_COL])


def load_nav_table(
    source: str | os.PathLike | io.StringIO,
    *,
    date_format: Optional[str] = AMFI_DATE_FORMAT,
) -> NavSeries:
    return series_from_frame(read_nav_frame(source, date_format=date_format))


def write_nav_table(
    series: NavSeries,
    path: str | os.PathLike,
    *,
    date_format: str = AMFI_DATE_FORMAT,
) -> None:
    df = series_to_frame(series)
    df[DATE_COL] = pd.to_datetime(df[DATE_COL]).dt.strftime(date_format)
    df.to_csv(path, index=False)


__all__ = [
    "DATE_COL",
    "NAV_COL",
    "AMFI_DATE_FORMAT",
    "read_nav_frame",
    "series_from_frame",
    "series_to_frame",
    "load_nav_table",
    "write_nav_table",
]
