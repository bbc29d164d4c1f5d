import csv
import json
from datetime import date, timedelta
from pathlib import Path

import pytest
from pytest import approx

from mfxirr.errors import ConfigError
from mfxirr.scenario_runner import run_file, run_matrix


def _write_navs(path: Path, start: date, days: int, value=lambda i: 10.0) -> Path:
    lines = ["Net Asset Value,Repurchase Price,Sale Price,Date"]
    for i in range(days):
        d = start + timedelta(days=i)
        if d.weekday() >= 5:  # no NAV on weekends
            continue
        lines.append(f"{value(i)},,,{d.strftime('%d-%b-%Y')}")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


CFG = """\
nav: { path: navs.csv }
lumpsum:
  - { name: one-year, invest_date: 2020-01-01, years: 1 }
  - { name: too-long, invest_date: 2020-01-01, years: 10 }
sip:
  - { name: monthly, start_date: 2020-01-01, years: 1, amount: 100, freq: month }
"""


@pytest.fixture
def scenario(tmp_path, monkeypatch):
    monkeypatch.delenv("VALIDATION_MODE", raising=False)
    _write_navs(tmp_path / "navs.csv", date(2020, 1, 1), 800)
    cfg = tmp_path / "case.yaml"
    cfg.write_text(CFG, encoding="utf-8")
    return cfg


def test_run_file_writes_summary_and_results(scenario, tmp_path):
    out = tmp_path / "out"
    with pytest.warns(UserWarning, match="lumpsum\\[1\\] failed"):
        res = run_file(scenario, out, fmt="csv")

    s = res.summary
    assert s["scenarios"] == 3
    assert s["failed"] == 1
    assert s["nav_first_date"] == "2020-01-01"
    by_name = {r["name"]: r for r in s["results"]}
    assert by_name["one-year"]["irr"] == approx(0.0, abs=1e-8)
    assert by_name["monthly"]["irr"] == approx(0.0, abs=1e-8)
    assert by_name["too-long"]["irr"] is None
    assert "above" in by_name["too-long"]["error"]

    assert json.loads(res.summary_path.read_text(encoding="utf-8"))["failed"] == 1
    assert res.results_path is not None and res.results_path.suffix == ".csv"
    with res.results_path.open(encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [r["name"] for r in rows] == ["one-year", "too-long", "monthly"]


def test_run_file_jsonl(scenario, tmp_path):
    with pytest.warns(UserWarning):
        res = run_file(scenario, tmp_path / "out", fmt="jsonl")
    lines = res.results_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 3
    assert json.loads(lines[0])["kind"] == "lumpsum"


def test_run_file_growth(tmp_path, monkeypatch):
    monkeypatch.delenv("VALIDATION_MODE", raising=False)
    # NAV 10 on the first day, 12 a year later and after
    _write_navs(tmp_path / "navs.csv", date(2021, 1, 1), 500, value=lambda i: 10.0 if i < 365 else 12.0)
    cfg = tmp_path / "g.yaml"
    cfg.write_text("nav: navs.csv\nlumpsum: [{invest_date: 2021-01-01, years: 1}]\n", encoding="utf-8")
    res = run_file(cfg, tmp_path / "out")
    row = res.summary["results"][0]
    assert row["irr"] == approx(0.20, abs=1e-8)
    assert row["units"] == approx(100.0)


def test_nav_override_and_missing_nav(tmp_path, monkeypatch):
    monkeypatch.delenv("VALIDATION_MODE", raising=False)
    navs = _write_navs(tmp_path / "elsewhere.csv", date(2020, 1, 1), 800)
    cfg = tmp_path / "c.yaml"
    cfg.write_text("lumpsum: [{invest_date: 2020-01-01, years: 1}]\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="no NAV table"):
        run_file(cfg, tmp_path / "out")
    res = run_file(cfg, tmp_path / "out", nav_path=navs)
    assert res.summary["failed"] == 0


def test_unknown_format(scenario, tmp_path):
    with pytest.raises(ConfigError):
        run_file(scenario, tmp_path / "out", fmt="xlsx")


def test_run_matrix(scenario, tmp_path):
    with pytest.warns(UserWarning):
        res = run_matrix(scenario.parent, tmp_path / "m")
    assert list(res) == ["case.yaml"]
    assert (tmp_path / "m" / "case_yaml" / "summary.json").exists()


def test_run_matrix_picks_up_yml_and_json(tmp_path, monkeypatch):
    monkeypatch.delenv("VALIDATION_MODE", raising=False)
    cases = tmp_path / "cases"
    (cases / "nested").mkdir(parents=True)
    _write_navs(cases / "navs.csv", date(2020, 1, 1), 800)
    (cases / "a.yml").write_text("nav: navs.csv\nlumpsum: [{invest_date: 2020-01-01, years: 1}]\n", encoding="utf-8")
    (cases / "nested" / "b.json").write_text(
        json.dumps({"nav": "../navs.csv", "sip": [{"start_date": "2020-01-01", "years": 1, "amount": 100}]}),
        encoding="utf-8",
    )
    res = run_matrix(cases, tmp_path / "m", fmt="jsonl")
    assert sorted(res) == ["a.yml", "nested/b.json"]
    assert all(r.summary["failed"] == 0 for r in res.values())
    assert (tmp_path / "m" / "nested" / "b_json" / "summary.json").exists()


def test_run_matrix_nav_override(tmp_path, monkeypatch):
    monkeypatch.delenv("VALIDATION_MODE", raising=False)
    navs = _write_navs(tmp_path / "elsewhere.csv", date(2020, 1, 1), 800)
    cases = tmp_path / "cases"
    cases.mkdir()
    (cases / "c.yaml").write_text("lumpsum: [{invest_date: 2020-01-01, years: 1}]\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="no NAV table"):
        run_matrix(cases, tmp_path / "m")
    res = run_matrix(cases, tmp_path / "m", nav_path=navs)
    assert res["c.yaml"].summary["nav_path"] == str(navs)


def test_run_matrix_empty_dir(tmp_path):
    with pytest.raises(ConfigError, match="no scenario files"):
        run_matrix(tmp_path, tmp_path / "m")

