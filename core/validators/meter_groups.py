# -*- coding: utf-8 -*-
"""Validations for meter group inputs (run before the engine)."""

from __future__ import annotations

from typing import Iterable, List

from core.models.distribution import MeterGroup
from core.types import Issue, Severity
from domain.meter_catalog import METER_CAPACITIES, METER_TYPES


def validate_meter_groups(groups: Iterable[MeterGroup], *, tolerance: float = 1e-6) -> List[Issue]:
    issues: List[Issue] = []
    seen_ids = set()
    for g in groups or []:
        ctx = f"group {g.id}"
        if g.id in seen_ids:
            issues.append(Issue(code="GROUP_ID_DUPLICATE", message=f"Meter group id {g.id!r} is used more than once.", severity=Severity.ERROR, context=ctx))
        seen_ids.add(g.id)

        if g.type not in METER_TYPES:
            issues.append(Issue(code="METER_TYPE_UNKNOWN", message=f"Unknown meter type {g.type!r}.", severity=Severity.ERROR, context=ctx))

        if int(g.count) <= 0:
            issues.append(Issue(code="METER_COUNT_INVALID", message="Meter count must be a positive integer.", severity=Severity.ERROR, context=ctx))
            continue

        if float(g.capacity) <= 0:
            issues.append(Issue(code="METER_CAPACITY_INVALID", message="Meter capacity must be positive.", severity=Severity.ERROR, context=ctx))
        elif int(g.capacity) not in METER_CAPACITIES or float(g.capacity) != int(g.capacity):
            issues.append(Issue(code="METER_CAPACITY_NONSTANDARD", message=f"{g.capacity:g}A is not a standard meter rating.", severity=Severity.WARNING, context=ctx))

        expected = float(g.cdl_per_meter) * int(g.count)
        if abs(expected - float(g.total_cdl)) > tolerance * max(1.0, abs(float(g.total_cdl))):
            issues.append(Issue(
                code="GROUP_CDL_MISMATCH",
                message=f"cdl_per_meter x count ({expected:.3f}A) differs from total_cdl ({float(g.total_cdl):.3f}A).",
                severity=Severity.ERROR,
                context=ctx,
            ))
    return issues
