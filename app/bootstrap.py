# -*- coding: utf-8 -*-
"""
Application bootstrap (runs before the entry point):
- Init logging
- Load balancing overrides from the user settings file
"""
from __future__ import annotations

from core.config import BalancingConfig
from infra.logging_setup import init_logging, init_perf_logging
from infra.perf import is_enabled as perf_enabled
from infra.settings import load_balancing_config


def bootstrap() -> BalancingConfig:
    init_logging()
    if perf_enabled():
        init_perf_logging()
    return load_balancing_config()
