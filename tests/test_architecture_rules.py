# -*- coding: utf-8 -*-
import os
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(ROOT, "scripts"))

from check_architecture import find_violations  # noqa: E402


def test_layer_boundaries_hold():
    assert find_violations() == []


def test_violation_is_detected(tmp_path):
    (tmp_path / "domain").mkdir()
    (tmp_path / "domain" / "bad.py").write_text("from services.distribution_service import DistributionService\n", encoding="utf-8")
    (tmp_path / "core").mkdir()
    (tmp_path / "core" / "ok.py").write_text("from domain.stats import summarize\n", encoding="utf-8")
    violations = find_violations(tmp_path)
    assert len(violations) == 1
    assert "domain/bad.py:1 imports 'services'" in violations[0].replace(os.sep, "/")
