# mfxirr/cli.py
from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from .errors import ConfigError
from .loaders import AMFI_DATE_FORMAT, load_nav_table, write_nav_table
from .utils import as_date


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="mfxirr",
        description="Mutual-fund NAV lookup and XIRR calculator",
    )
    p.add_argument(
        "--mode",
        required=True,
        choices=["irr", "nav", "fill", "lumpsum", "sip"],
        help="irr: run a scenario file/dir; nav: NAV on --date; fill: write gap-filled table; "
        "lumpsum/sip: one-off scenario from flags.",
    )
    p.add_argument("--config", default=None, help="Scenario YAML/JSON file, or a directory of them (mode irr).")
    p.add_argument(
        "--outputs-dir",
        default="outputs",
        help="Directory to write result files (default: outputs). Will be created if missing.",
    )
    p.add_argument(
        "--format",
        dest="fmt",
        default="csv",
        choices=["csv", "jsonl"],
        help="Output format for per-scenario results (default: csv).",
    )
    p.add_argument("--nav-file", default=None, help="NAV history CSV (overrides nav.path in the config).")
    p.add_argument("--date-format", default=AMFI_DATE_FORMAT, help="strptime format of the NAV table dates.")
    p.add_argument("--date", default=None, help="ISO date: lookup date (nav) or start date (lumpsum/sip).")
    p.add_argument("--years", type=float, default=None, help="Holding period in years.")
    p.add_argument("--notional", type=float, default=1000.0, help="Lump-sum amount (default: 1000).")
    p.add_argument("--amount", type=float, default=None, help="SIP installment amount.")
    p.add_argument("--freq", default="month", help="SIP frequency, e.g. month, week, '2 weeks' (default: month).")
    p.add_argument("--on-missing", choices=["raise", "skip"], default="raise", help="SIP installments with no NAV.")
    p.add_argument("--out", default=None, help="Output CSV for mode fill (default: <outputs-dir>/filled_navs.csv).")
    p.add_argument(
        "--strategy",
        choices=["resolve", "insert"],
        default="resolve",
        help="Gap-fill strategy for mode fill (identical output).",
    )
    v = p.add_mutually_exclusive_group()
    v.add_argument("--strict", action="store_true", help="Enable strict validation (unknown keys raise).")
    v.add_argument("--relaxed", action="store_true", help="Enable relaxed validation.")
    return p.parse_args(argv)


def _apply_validation_mode(ns: argparse.Namespace) -> None:
    # Default: leave env as-is; flags override explicitly.
    if ns.strict:
        os.environ["VALIDATION_MODE"] = "strict"
    elif ns.relaxed:
        os.environ["VALIDATION_MODE"] = "relaxed"


def _need(ns: argparse.Namespace, *names: str) -> None:
    missing = ["--" + n.replace("_", "-") for n in names if getattr(ns, n) in (None, "")]
    if missing:
        raise ConfigError(f"mode {ns.mode} requires {', '.join(missing)}")


def _run(ns: argparse.Namespace, outputs_dir: Path) -> int:
    # Heavy imports stay behind the mode dispatch
    if ns.mode == "irr":
        from .scenario_runner import run_file, run_matrix

        _need(ns, "config")
        cfg = Path(ns.config).resolve()
        if cfg.is_dir():
            res = run_matrix(cfg, outputs_dir, fmt=ns.fmt, nav_path=ns.nav_file)
            failed = sum(r.summary["failed"] for r in res.values())
            print(f"Ran {len(res)} scenario files ({failed} failed scenarios).")
        else:
            r = run_file(cfg, outputs_dir, fmt=ns.fmt, nav_path=ns.nav_file)
            for row in r.summary["results"]:
                irr = row.get("irr")
                shown = f"{irr * 100.0:.2f}%" if irr is not None else f"n/a ({row.get('error')})"
                print(f"{row['name']}: {shown}")
        return 0

    _need(ns, "nav_file")
    series = load_nav_table(ns.nav_file, date_format=ns.date_format)

    if ns.mode == "nav":
        from .nav.resolver import resolve

        _need(ns, "date")
        print(resolve(as_date(ns.date), series))
        return 0

    if ns.mode == "fill":
        from .nav.fill import fill, fill_by_insertion

        filled = fill(series) if ns.strategy == "resolve" else fill_by_insertion(series)
        out = Path(ns.out) if ns.out else outputs_dir / "filled_navs.csv"
        out.parent.mkdir(parents=True, exist_ok=True)
        write_nav_table(filled, out, date_format=ns.date_format)
        print(f"Wrote {len(filled)} rows to {out}")
        return 0

    from .adapters import run_lumpsum, run_sip

    _need(ns, "date", "years")
    if ns.mode == "lumpsum":
        if ns.years != int(ns.years):
            raise ConfigError("--years must be a whole number for lumpsum")
        row = run_lumpsum(as_date(ns.date), int(ns.years), series, notional=ns.notional)
    else:
        _need(ns, "amount")
        row = run_sip(ns.amount, as_date(ns.date), ns.years, ns.freq, series, on_missing=ns.on_missing)
    print(json.dumps(row, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    try:
        ns = _parse_args(argv)
    except SystemExit as e:
        return int(e.code) if isinstance(e.code, int) else 2
    _apply_validation_mode(ns)

    outputs_dir = Path(ns.outputs_dir).resolve()

    try:
        return _run(ns, outputs_dir)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except Exception as e:
        # Fail noisily with non-zero
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


__all__ = ["main"]
