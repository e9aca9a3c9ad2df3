# domain/stats.py
"""Run-level statistics over a finished plan.

Breaker/transformer loads are recomputed by the models themselves
(``Breaker.recompute`` / ``Transformer.recompute``); this module only reads them.
"""
from __future__ import annotations

import statistics
from collections import Counter
from typing import List, Sequence, Tuple

from core.config import BalancingConfig
from core.models.distribution import Breaker, DistributionSummary, MeterGroup, Transformer
from core.types import Issue, Severity


def active_breakers(transformers: Sequence[Transformer]) -> List[Breaker]:
    return [b for t in transformers for b in t.breakers if b.meters]


def balance_score(transformers: Sequence[Transformer]) -> float:
    """100 - 2 * stddev(utilization) over non-dedicated transformers, clamped to [0, 100]."""
    utils = [b.utilization_percent for t in transformers if not t.is_dedicated for b in t.breakers if b.meters]
    if len(utils) < 2:
        return 100.0
    return max(0.0, min(100.0, 100.0 - statistics.pstdev(utils) * 2.0))


def efficiency(transformers: Sequence[Transformer]) -> float:
    used = sum(t.assigned_load for t in transformers)
    capacity = sum(t.type.safe_load for t in transformers)
    return (used / capacity * 100.0) if capacity > 0 else 0.0


def breaker_limit(breaker: Breaker, config: BalancingConfig) -> float:
    if breaker.dedicated and breaker.dedicated_capacity and len(breaker.meters) == 1:
        return float(breaker.dedicated_capacity)
    return config.breaker_safe_capacity


def is_breaker_overloaded(breaker: Breaker, config: BalancingConfig) -> bool:
    return breaker.load > breaker_limit(breaker, config) + config.overload_tolerance


def is_transformer_overloaded(transformer: Transformer, config: BalancingConfig) -> bool:
    return transformer.assigned_load > transformer.safe_capacity + config.overload_tolerance


def split_pair_count(breakers: Sequence[Breaker]) -> int:
    return len({m.base_id for b in breakers for m in b.meters if m.half == 2})


def capacity_tally(transformers: Sequence[Transformer]) -> Tuple[Tuple[int, int], ...]:
    counts = Counter(t.type.capacity for t in transformers)
    return tuple(sorted(counts.items(), key=lambda kv: kv[0], reverse=True))


def summarize(
    transformers: Sequence[Transformer],
    groups: Sequence[MeterGroup],
    total_load: float,
    config: BalancingConfig,
) -> DistributionSummary:
    breakers = active_breakers(transformers)
    utils = [b.utilization_percent for b in breakers]

    issues: List[Issue] = []
    overloaded_breakers = 0
    for t in transformers:
        for b in t.breakers:
            if b.meters and is_breaker_overloaded(b, config):
                overloaded_breakers += 1
                issues.append(Issue(
                    code="BREAKER_OVERLOAD",
                    message=f"Transformer {t.id} breaker {b.number} carries {b.load:.1f}A (limit {breaker_limit(b, config):.1f}A).",
                    severity=Severity.WARNING,
                    context=f"t{t.id}-b{b.number}",
                ))
    overloaded_transformers = 0
    for t in transformers:
        if is_transformer_overloaded(t, config):
            overloaded_transformers += 1
            issues.append(Issue(
                code="TRANSFORMER_OVERLOAD",
                message=f"Transformer {t.id} ({t.type.name}) carries {t.assigned_load:.1f}A (safe {t.safe_capacity:.1f}A).",
                severity=Severity.WARNING,
                context=f"t{t.id}",
            ))

    tally = capacity_tally(transformers)
    score = balance_score(transformers)
    return DistributionSummary(
        total_transformers=len(transformers),
        total_breakers=len(breakers),
        distribution_entries=len(breakers) - split_pair_count(breakers),
        total_meters=sum(int(g.count) for g in groups),
        total_load=float(total_load),
        total_load_kva=float(total_load) * config.kva_factor,
        overloaded_breakers=overloaded_breakers,
        overloaded_transformers=overloaded_transformers,
        max_utilization=max(utils) if utils else 0.0,
        min_utilization=min(utils) if utils else 0.0,
        avg_utilization=(sum(utils) / len(utils)) if utils else 0.0,
        balance_score=score,
        efficiency=efficiency(transformers),
        capacity_tally=tally,
        transformer_details=", ".join(f"{count}x {cap} KVA" for cap, count in tally),
        issues=tuple(issues),
    )
