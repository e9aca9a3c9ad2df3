# -*- coding: utf-8 -*-
"""Shared domain types (pure, test-friendly)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Issue:
    code: str
    message: str
    severity: Severity = Severity.WARNING
    context: Optional[str] = None


def has_errors(issues: Sequence[Issue]) -> bool:
    return any(it.severity == Severity.ERROR for it in (issues or []))


class AllocationError(RuntimeError):
    """Raised when meters cannot be hosted by any transformer the catalog can build.

    The run is aborted instead of silently dropping meters.
    """

    def __init__(self, message: str, unplaced: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.unplaced: Tuple[str, ...] = tuple(unplaced)
