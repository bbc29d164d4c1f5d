"""
mfxirr: NAV lookup with forward-fill, and XIRR for lump-sum / SIP investments.

Public entry points are re-exported here; implementations live in the
submodules (XIRR/NPV only in mfxirr.finance.irr).
"""
from .errors import ConfigError, MalformedSeriesError, MfXirrError, NoRootError, OutOfRangeError
from .nav.series import NavObservation, NavSeries
from .nav.resolver import get_nav, resolve
from .nav.fill import fill, fill_by_insertion
from .finance.cashflow import CashFlow
from .finance.irr import npv, xirr
from .adapters import lumpsum_irr, sip_irr, rolling_lumpsum_irr, rolling_sip_irr

__version__ = "0.1.0"

__all__ = [
    "MfXirrError",
    "OutOfRangeError",
    "NoRootError",
    "MalformedSeriesError",
    "ConfigError",
    "NavObservation",
    "NavSeries",
    "resolve",
    "get_nav",
    "fill",
    "fill_by_insertion",
    "CashFlow",
    "npv",
    "xirr",
    "lumpsum_irr",
    "sip_irr",
    "rolling_lumpsum_irr",
    "rolling_sip_irr",
]
