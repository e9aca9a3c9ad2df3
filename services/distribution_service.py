# -*- coding: utf-8 -*-
"""Distribution compute service (pure, no UI dependencies).

Validates meter groups, runs both engine stages and returns either the runtime
objects (:meth:`DistributionService.run`) or a JSON-serializable snapshot
(:meth:`DistributionService.compute`) suitable for export or for crossing a
thread boundary.
"""
from __future__ import annotations

import logging
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from core.calculations.distribution import calculate_final_connections, perform_balanced_distribution
from core.config import BalancingConfig
from core.models.connections import FinalConnection
from core.models.distribution import DistributionResults, IndividualMeter, MeterGroup
from core.types import Issue, Severity, has_errors
from core.validators.meter_groups import validate_meter_groups
from domain.meter_catalog import build_meter_groups
from infra.perf import span

log = logging.getLogger(__name__)


def _as_serializable(obj: Any) -> Any:
    if obj is None:
        return None
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, IndividualMeter):
        out = {"id": obj.key}
        out.update({f.name: _as_serializable(getattr(obj, f.name)) for f in fields(obj) if f.name != "identity"})
        return out
    if is_dataclass(obj):
        return {f.name: _as_serializable(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, Mapping):
        return {str(k): _as_serializable(v) for k, v in obj.items()}
    if isinstance(obj, (set, frozenset)):
        return sorted(_as_serializable(v) for v in obj)
    if isinstance(obj, (list, tuple)):
        return [_as_serializable(v) for v in obj]
    return str(obj)


def issue_to_dict(it: Issue) -> dict:
    sev = str(it.severity.value if hasattr(it.severity, "value") else it.severity)
    level = {
        "info": "info",
        "warning": "warn",
        "error": "error",
    }.get(sev, "warn")
    return {
        "code": it.code,
        "msg": it.message,
        "level": level,
        "context": it.context,
    }


class DistributionService:
    def __init__(self, config: Optional[BalancingConfig] = None) -> None:
        self.config = config

    def validate(self, groups: Sequence[MeterGroup]) -> List[Issue]:
        issues = validate_meter_groups(groups)
        if not groups:
            issues.append(Issue(code="NO_METERS", message="Add at least one meter group.", severity=Severity.ERROR))
        return issues

    def run(self, groups: Iterable[MeterGroup]) -> Tuple[DistributionResults, List[FinalConnection], List[Issue]]:
        groups = list(groups or [])
        issues = self.validate(groups)
        if has_errors(issues):
            detail = "; ".join(f"{it.context or '-'}: {it.message}" for it in issues if it.severity == Severity.ERROR)
            raise ValueError(f"Invalid meter groups: {detail}")

        with span("distribution"):
            results = perform_balanced_distribution(groups, self.config)
        with span("final_connections"):
            connections = calculate_final_connections(results.transformers, self.config)

        issues.extend(results.summary.issues)
        if results.summary.overloaded_breakers or results.summary.overloaded_transformers:
            log.warning(
                "Plan has %s overloaded breaker(s) and %s overloaded transformer(s)",
                results.summary.overloaded_breakers, results.summary.overloaded_transformers,
            )
        return results, connections, issues

    def compute(self, groups: Iterable[MeterGroup]) -> Dict[str, Any]:
        return self.snapshot(*self.run(groups))

    @staticmethod
    def snapshot(
        results: DistributionResults,
        connections: Sequence[FinalConnection],
        issues: Sequence[Issue],
    ) -> Dict[str, Any]:
        return {
            "results": _as_serializable(results),
            "connections": _as_serializable(connections),
            "issues": [issue_to_dict(it) for it in issues],
        }

    def compute_rows(self, rows: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
        """Same as :meth:`compute`, from ``{"type", "count", "capacity"}`` rows."""
        return self.compute(build_meter_groups(rows))
