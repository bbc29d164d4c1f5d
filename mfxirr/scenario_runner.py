# mfxirr/scenario_runner.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, List, Optional
from datetime import datetime
import warnings
import json, csv

from .adapters import run_lumpsum, run_sip
from .config import split_config
from .errors import ConfigError, MfXirrError
from .finance.cashflow import DEFAULT_NOTIONAL
from .loaders import AMFI_DATE_FORMAT, load_nav_table
from .nav.series import NavSeries
from .utils import as_date, to_double
from .validate import (
    _iter_input_files,
    _mode_from_env_or_flag,
    load_params_from_file,
    validate_params_dict,
)


@dataclass
class RunResult:
    summary: Dict[str, Any]
    summary_path: Path
    results_path: Optional[Path] = None


def _write_jsonl(path: Path, rows: List[Dict[str, Any]]) -> None:
    with path.open("w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row) + "\n")


def _write_csv(path: Path, rows: List[Dict[str, Any]]) -> None:
    if not rows:
        path.write_text("", encoding="utf-8")
        return
    hdr: List[str] = []
    for r in rows:
        for k in r.keys():
            if k not in hdr:
                hdr.append(k)
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=hdr)
        w.writeheader()
        for r in rows:
            w.writerow({k: r.get(k, "") for k in hdr})


def _resolve_nav_path(nav: Dict[str, Any], cfg_path: Path, override: str | Path | None) -> Path:
    if override:
        return Path(override)
    raw = nav.get("path")
    if not raw:
        raise ConfigError(f"{cfg_path}: no NAV table given (set nav.path or pass --nav-file)")
    p = Path(raw)
    return p if p.is_absolute() else cfg_path.parent / p


def _failed_row(kind: str, entry: Dict[str, Any], err: Exception) -> Dict[str, Any]:
    start = entry.get("invest_date", entry.get("start_date"))
    return {
        "kind": kind,
        "start_date": str(start),
        "years": entry.get("years"),
        "irr": None,
        "error": str(err),
    }


def run_scenarios(cfg: Dict[str, Any], series: NavSeries) -> List[Dict[str, Any]]:
    """
    Compute every lumpsum/sip entry of an already-validated config.
    A failing scenario becomes a row with irr=None and an `error` message.
    """
    rows: List[Dict[str, Any]] = []
    for i, e in enumerate(cfg.get("lumpsum", [])):
        try:
            row = run_lumpsum(
                as_date(e["invest_date"]),
                int(e["years"]),
                series,
                notional=to_double(e.get("notional", DEFAULT_NOTIONAL)),
            )
        except MfXirrError as err:
            warnings.warn(f"lumpsum[{i}] failed: {err}")
            row = _failed_row("lumpsum", e, err)
        row["name"] = e.get("name", f"lumpsum[{i}]")
        rows.append(row)

    for i, e in enumerate(cfg.get("sip", [])):
        try:
            row = run_sip(
                to_double(e["amount"]),
                as_date(e["start_date"]),
                to_double(e["years"]),
                e.get("freq", "month"),
                series,
                on_missing=e.get("on_missing", "raise"),
            )
        except MfXirrError as err:
            warnings.warn(f"sip[{i}] failed: {err}")
            row = _failed_row("sip", e, err)
        row["name"] = e.get("name", f"sip[{i}]")
        rows.append(row)
    return rows


def run_file(
    config: str | Path,
    out_dir: str | Path,
    *,
    fmt: str = "csv",
    nav_path: str | Path | None = None,
    mode: str | None = None,
) -> RunResult:
    if fmt not in ("csv", "jsonl"):
        raise ConfigError(f"unknown fmt: {fmt}")

    cfg_path = Path(config)
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    data = load_params_from_file(cfg_path)
    validate_params_dict(data, mode=_mode_from_env_or_flag(mode))
    cfg, nav = split_config(data)

    src = _resolve_nav_path(nav, cfg_path, nav_path)
    series = load_nav_table(src, date_format=nav.get("date_format", AMFI_DATE_FORMAT))

    rows = run_scenarios(cfg, series)
    failed = sum(1 for r in rows if r.get("irr") is None)
    if failed:
        warnings.warn(f"{failed}/{len(rows)} scenarios failed")

    summary: Dict[str, Any] = {
        "config": str(cfg_path),
        "nav_path": str(src),
        "nav_first_date": series.first_date.isoformat(),
        "nav_last_date": series.last_date.isoformat(),
        "scenarios": len(rows),
        "failed": failed,
        "results": rows,
    }
    summary_path = out / "summary.json"
    summary_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    results_path = out / f"{cfg_path.stem}_results_{stamp}.{fmt}"
    if fmt == "jsonl":
        _write_jsonl(results_path, rows)
    else:
        _write_csv(results_path, rows)

    return RunResult(summary=summary, summary_path=summary_path, results_path=results_path)


def run_matrix(
    dir_path: str | Path,
    out_dir: str | Path,
    *,
    fmt: str = "csv",
    nav_path: str | Path | None = None,
    mode: str | None = None,
) -> Dict[str, RunResult]:
    """
    Run every scenario file (*.yaml, *.yml, *.json) under dir_path, each into
    its own out_dir/<relative path with dots replaced> folder.
    """
    d = Path(dir_path)
    o = Path(out_dir)
    # listed before running so outputs written under dir_path are not picked up
    files = [f for f in _iter_input_files(d) if f.is_file()]
    if not files:
        raise ConfigError(f"{d}: no scenario files (*.yaml, *.yml, *.json)")
    o.mkdir(parents=True, exist_ok=True)
    results: Dict[str, RunResult] = {}
    for cfg in files:
        rel = cfg.relative_to(d)
        results[rel.as_posix()] = run_file(
            cfg, o / rel.parent / rel.name.replace(".", "_"), fmt=fmt, nav_path=nav_path, mode=mode
        )
    return results

