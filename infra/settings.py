# -*- coding: utf-8 -*-
"""
User settings stored in a per-user writable folder (no admin).

The file holds balancing overrides under the ``"balancing"`` key, e.g.::

    {"balancing": {"consolidate": true, "diversity_bonus": 30}}
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from core.config import DEFAULT_CONFIG, BalancingConfig, config_from_overrides
from infra.paths import user_data_dir

SETTINGS_FILENAME = "lvplan_settings.json"
log = logging.getLogger(__name__)


def settings_file() -> Path:
    return user_data_dir() / SETTINGS_FILENAME


def _defaults() -> Dict[str, Any]:
    return {"balancing": {}}


def load_settings() -> Dict[str, Any]:
    defaults = _defaults()
    path = settings_file()
    if not path.exists():
        save_settings(defaults)
        return defaults

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        # Recover from corruption: reset to defaults
        log.warning("Settings file %s is unreadable; resetting to defaults", path, exc_info=True)
        save_settings(defaults)
        return _defaults()

    merged = _defaults()
    if isinstance(data, dict):
        merged.update({k: v for k, v in data.items() if v is not None})
    if not isinstance(merged.get("balancing"), dict):
        log.warning("Ignoring malformed 'balancing' section in %s", path)
        merged["balancing"] = {}
    return merged


def save_settings(data: Dict[str, Any]) -> None:
    path = settings_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


def load_balancing_config(base: BalancingConfig = DEFAULT_CONFIG) -> BalancingConfig:
    overrides = load_settings().get("balancing", {})
    config, ignored = config_from_overrides(overrides, base)
    for key, value in ignored.items():
        log.warning("Ignoring balancing setting %s=%r", key, value)
    return config
