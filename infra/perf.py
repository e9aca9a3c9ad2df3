# -*- coding: utf-8 -*-
"""Lightweight performance instrumentation.

Enable by setting env var:
    LVPLAN_PERF=1

When enabled, timings are written to logger ``lvplan.perf``.
"""

from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager

_perf_env = os.environ.get("LVPLAN_PERF", "").strip().lower()
ENABLED = _perf_env in ("1", "true", "yes", "on")

log = logging.getLogger("lvplan.perf")


def is_enabled() -> bool:
    return ENABLED


@contextmanager
def span(label: str, *, threshold_ms: float = 50.0):
    """Measure a block duration and log it if above threshold (no-op when disabled)."""
    if not ENABLED:
        yield
        return
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt_ms = (time.perf_counter() - t0) * 1000.0
        if dt_ms >= float(threshold_ms or 0.0):
            log.info("PERF %s %.1fms", label, dt_ms)
