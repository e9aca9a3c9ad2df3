# -*- coding: utf-8 -*-
"""
Centralized path resolver for per-user writable data (no admin required).
"""
from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "LVPlan"
DATA_DIR_ENV = "LVPLAN_DATA_DIR"


def user_data_dir() -> Path:
    """
    Per-user writable directory. ``LVPLAN_DATA_DIR`` wins; otherwise prefer
    LOCALAPPDATA (non-roaming), then APPDATA, then the home folder.
    """
    override = os.getenv(DATA_DIR_ENV)
    if override:
        p = Path(override).expanduser()
    else:
        base = os.getenv("LOCALAPPDATA") or os.getenv("APPDATA") or str(Path.home())
        p = Path(base) / APP_NAME
    p.mkdir(parents=True, exist_ok=True)
    return p


def ensure_dir(p: Path) -> Path:
    p.mkdir(parents=True, exist_ok=True)
    return p


def logs_dir() -> Path:
    return ensure_dir(user_data_dir() / "logs")
