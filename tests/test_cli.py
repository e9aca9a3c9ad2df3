# -*- coding: utf-8 -*-
import json
from dataclasses import asdict

from domain.meter_catalog import build_meter_groups
from main import EXIT_BAD_INPUT, EXIT_FAILED, EXIT_OK, groups_from_payload, main


def test_sample_run_prints_summary(data_dir, capsys):
    assert main(["--sample"]) == EXIT_OK
    out = capsys.readouterr().out
    assert "Transformers:" in out
    assert "Connections:" in out


def test_rows_file_and_snapshot(data_dir, capsys):
    src = data_dir / "rows.json"
    src.write_text(json.dumps([{"type": "C1", "count": 1, "capacity": 600}]), encoding="utf-8")
    out = data_dir / "plan.json"
    assert main([str(src), "--consolidate", "--out", str(out)]) == EXIT_OK
    snap = json.loads(out.read_text(encoding="utf-8"))
    assert snap["connections"][0]["breaker_number"] == "1 & 2"
    assert "breaker 1 & 2" in capsys.readouterr().out


def test_full_groups_accepted():
    rows = [{"type": "C1", "count": 2, "capacity": 50}]
    full = {"meter_groups": [asdict(g) for g in build_meter_groups(rows)]}
    assert groups_from_payload(full) == build_meter_groups(rows)


def test_unreadable_input(data_dir):
    bad = data_dir / "bad.json"
    bad.write_text("{", encoding="utf-8")
    assert main([str(bad)]) == EXIT_BAD_INPUT
    assert main([str(data_dir / "missing.json")]) == EXIT_BAD_INPUT
    assert main([]) == EXIT_BAD_INPUT


def test_invalid_rows_fail(data_dir):
    src = data_dir / "rows.json"
    src.write_text(json.dumps([{"type": "C99", "count": 1, "capacity": 50}]), encoding="utf-8")
    assert main([str(src)]) == EXIT_FAILED


def test_summary_shows_upfront_sizing(data_dir, capsys):
    src = data_dir / "rows.json"
    src.write_text(json.dumps([{"type": "C29", "count": 1, "capacity": 2500}]), encoding="utf-8")
    assert main([str(src)]) == EXIT_OK
    assert "Upfront sizing for the total load: 1500 KVA + 500 KVA" in capsys.readouterr().out
