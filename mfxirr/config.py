from __future__ import annotations

from typing import Any, Dict, List, Tuple

SCENARIO_KINDS = ("lumpsum", "sip")


def _as_list(v: Any) -> List[Dict[str, Any]]:
    if v is None:
        return []
    if isinstance(v, dict):
        return [v]
    return [dict(x) for x in v if isinstance(x, dict)]


def _apply_defaults(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """
    Push the shared `defaults` group down into every lumpsum/sip entry.
    Keys set on the entry itself win.
    """
    flat: Dict[str, Any] = dict(cfg)
    defaults = cfg.get("defaults") or {}
    for kind in SCENARIO_KINDS:
        entries = []
        for entry in _as_list(cfg.get(kind)):
            merged = dict(defaults)
            merged.update(entry)
            entries.append(merged)
        flat[kind] = entries
    return flat


def _split_nav(d: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    nav = d.pop("nav", {}) if isinstance(d, dict) else {}
    if isinstance(nav, str):
        nav = {"path": nav}
    return d, nav or {}


def split_config(cfg: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Already-parsed mapping -> (scenario_config, nav_section)."""
    return _split_nav(_apply_defaults(cfg))
