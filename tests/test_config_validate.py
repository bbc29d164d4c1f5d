from pathlib import Path

import pytest
import yaml

from mfxirr.config import split_config
from mfxirr.errors import ConfigError
from mfxirr.validate import _main, validate_params_dict

CFG = """\
nav: navs.csv
defaults: { notional: 5000, freq: week }
lumpsum:
  - { invest_date: 2020-01-01, years: 1 }
  - { invest_date: 2020-02-01, years: 2, notional: 100 }
sip:
  - { start_date: 2020-01-01, years: 1, amount: 100 }
"""


def test_defaults_are_pushed_into_entries():
    cfg, nav = split_config(yaml.safe_load(CFG))
    assert nav == {"path": "navs.csv"}
    assert [e["notional"] for e in cfg["lumpsum"]] == [5000, 100]
    assert cfg["sip"][0]["freq"] == "week"
    assert "nav" not in cfg


def test_single_mapping_entry_becomes_list():
    cfg, nav = split_config({"sip": {"start_date": "2020-01-01", "years": 1, "amount": 5}})
    assert isinstance(cfg["sip"], list) and len(cfg["sip"]) == 1
    assert cfg["lumpsum"] == []
    assert nav == {}


def test_relaxed_accepts_valid_config():
    validate_params_dict(yaml.safe_load(CFG), mode="relaxed")


def test_requires_some_scenario():
    with pytest.raises(ConfigError, match="no 'lumpsum' or 'sip'"):
        validate_params_dict({"nav": "x.csv"})


@pytest.mark.parametrize(
    "entry, msg",
    [
        ({"years": 1}, "invest_date"),
        ({"invest_date": "2020-01-01", "years": 0}, "years must be > 0"),
        ({"invest_date": "2020-01-01", "years": 1.5}, "whole number"),
        ({"invest_date": "01/01/2020", "years": 1}, "invest_date"),
        ({"invest_date": "2020-01-01", "years": 1, "notional": "lots"}, "must be a number"),
    ],
)
def test_bad_lumpsum(entry, msg):
    with pytest.raises(ConfigError, match=msg):
        validate_params_dict({"lumpsum": [entry]})


@pytest.mark.parametrize(
    "entry, msg",
    [
        ({"start_date": "2020-01-01", "years": 1}, "amount"),
        ({"start_date": "2020-01-01", "years": 1, "amount": 10, "freq": "hourly"}, "unknown frequency"),
        ({"start_date": "2020-01-01", "years": 1, "amount": 10, "on_missing": "zero"}, "on_missing"),
    ],
)
def test_bad_sip(entry, msg):
    with pytest.raises(ConfigError, match=msg):
        validate_params_dict({"sip": [entry]})


def test_strict_rejects_unknown_keys_and_missing_nav():
    data = {"lumpsum": [{"invest_date": "2020-01-01", "years": 1}]}
    with pytest.raises(ConfigError, match="nav.path"):
        validate_params_dict(data, mode="strict")
    with pytest.raises(ConfigError, match="unknown top-level"):
        validate_params_dict({**data, "nav": {"path": "x.csv"}, "extra": 1}, mode="strict")
    validate_params_dict({**data, "nav": {"path": "x.csv"}}, mode="strict")


def test_validate_main(tmp_path: Path, capsys, monkeypatch):
    monkeypatch.delenv("VALIDATION_MODE", raising=False)
    good = tmp_path / "good.yaml"
    good.write_text(CFG, encoding="utf-8")
    assert _main([str(good)]) == 0
    assert "OK:" in capsys.readouterr().out

    bad = tmp_path / "bad.yaml"
    bad.write_text("nav: x.csv\n", encoding="utf-8")
    assert _main([str(tmp_path)]) == 1
    assert "bad.yaml" in capsys.readouterr().err
