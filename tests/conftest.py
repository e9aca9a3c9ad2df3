# -*- coding: utf-8 -*-

"""Pytest configuration.

This project is a simple app folder layout (not installed as a package).
For local testing we add the repository root to sys.path so that imports like
`from core...` work reliably.
"""

from __future__ import annotations

import os
import sys

import pytest


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Redirect the per-user data folder into a temporary directory."""
    monkeypatch.setenv("LVPLAN_DATA_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture
def make_meter():
    from core.models.distribution import IndividualMeter, Whole

    def _make(mid, cdl, *, capacity=50.0, type="C1", category="Residential", group_id="G1"):
        return IndividualMeter(
            identity=Whole(mid),
            group_id=group_id,
            type=type,
            type_name=type,
            capacity=float(capacity),
            demand_factor=0.5,
            coincidence_factor=1.0,
            category=category,
            time_pattern="Nighttime",
            cdl=float(cdl),
        )

    return _make
