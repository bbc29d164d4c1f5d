# mfxirr/validate.py
from __future__ import annotations
import os, sys, json
from pathlib import Path
from typing import Any, Dict, Iterable, List
import yaml

from .errors import ConfigError
from .finance.cashflow import parse_freq
from .utils import as_date

TOP_LEVEL_KEYS = {"nav", "defaults", "lumpsum", "sip"}
ON_MISSING = ("raise", "skip")


def _mode_from_env_or_flag(flag: str | None) -> str:
    if flag in ("strict", "relaxed"):
        return flag
    env = (os.environ.get("VALIDATION_MODE") or "").lower()
    return env if env in ("strict", "relaxed") else "relaxed"


def _positive(entry: Dict[str, Any], key: str, where: str) -> None:
    if key not in entry:
        raise ConfigError(f"{where}: missing required key '{key}'")
    try:
        v = float(entry[key])
    except (TypeError, ValueError):
        raise ConfigError(f"{where}: {key} must be a number, got {entry[key]!r}")
    if not v > 0:
        raise ConfigError(f"{where}: {key} must be > 0, got {v}")


def _date(entry: Dict[str, Any], key: str, where: str) -> None:
    if key not in entry:
        raise ConfigError(f"{where}: missing required key '{key}'")
    try:
        as_date(entry[key])
    except ValueError as e:
        raise ConfigError(f"{where}: {key}: {e}")


def validate_lumpsum(entry: Dict[str, Any], *, where: str = "lumpsum") -> None:
    _date(entry, "invest_date", where)
    _positive(entry, "years", where)
    if float(entry["years"]) != int(float(entry["years"])):
        raise ConfigError(f"{where}: years must be a whole number of calendar years")
    if "notional" in entry:
        _positive(entry, "notional", where)


def validate_sip(entry: Dict[str, Any], *, where: str = "sip") -> None:
    _date(entry, "start_date", where)
    _positive(entry, "years", where)
    _positive(entry, "amount", where)
    try:
        parse_freq(entry.get("freq", "month"))
    except ValueError as e:
        raise ConfigError(f"{where}: {e}")
    if entry.get("on_missing", "raise") not in ON_MISSING:
        raise ConfigError(f"{where}: on_missing must be one of {ON_MISSING}")


def validate_params_dict(data: Dict[str, Any], *, mode: str = "relaxed") -> None:
    """
    Guardrails for a scenario file:
      - relaxed: at least one lumpsum/sip entry, each well-formed
      - strict : also require a `nav` section and reject unknown top-level keys
    """
    if mode == "strict":
        unknown = [k for k in data.keys() if k not in TOP_LEVEL_KEYS]
        if unknown:
            raise ConfigError(f"unknown top-level keys (strict mode): {unknown}")
        nav = data.get("nav")
        if not nav or (isinstance(nav, dict) and not nav.get("path")):
            raise ConfigError("strict mode requires 'nav.path' in config")

    lumps = data.get("lumpsum") or []
    sips = data.get("sip") or []
    if isinstance(lumps, dict):
        lumps = [lumps]
    if isinstance(sips, dict):
        sips = [sips]
    if not lumps and not sips:
        raise ConfigError("config defines no 'lumpsum' or 'sip' scenarios")

    defaults = data.get("defaults") or {}
    for i, e in enumerate(lumps):
        validate_lumpsum({**defaults, **e}, where=f"lumpsum[{i}]")
    for i, e in enumerate(sips):
        validate_sip({**defaults, **e}, where=f"sip[{i}]")


def load_params_from_file(path: Path) -> Dict[str, Any]:
    p = Path(path)
    if p.is_dir():
        raise ConfigError(f"{p} is a directory (expected a file)")
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text) or {}
    return json.loads(text or "{}")


def _iter_input_files(p: Path) -> Iterable[Path]:
    if p.is_file():
        yield p
    elif p.is_dir():
        for ext in ("*.yaml", "*.yml", "*.json"):
            yield from sorted(p.rglob(ext))


def _main(argv: List[str] | None = None) -> int:
    import argparse
    parser = argparse.ArgumentParser(prog="mfxirr.validate", add_help=True)
    parser.add_argument("paths", nargs="+", help="YAML/JSON scenario files or directories to validate")
    parser.add_argument("--mode", choices=["strict", "relaxed"], default=None, help="validation mode")
    args = parser.parse_args(argv)

    mode = _mode_from_env_or_flag(args.mode)
    had_error = False

    for raw in args.paths:
        target = Path(raw)
        any_seen = False
        for f in _iter_input_files(target):
            if not f.is_file():
                continue
            any_seen = True
            try:
                data = load_params_from_file(f)
                validate_params_dict(data, mode=mode)
                print(f"OK: {f}")
            except ConfigError as e:
                print(f"{f}: {e}", file=sys.stderr)
                had_error = True
            except (OSError, ValueError, yaml.YAMLError) as e:
                print(f"{f}: ERROR: {e}", file=sys.stderr)
                had_error = True
        if not any_seen:
            print(f"{target}: no YAML/JSON files found", file=sys.stderr)
            had_error = True

    return 1 if had_error else 0


if __name__ == "__main__":
    raise SystemExit(_main())
