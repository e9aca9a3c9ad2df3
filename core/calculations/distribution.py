# -*- coding: utf-8 -*-
"""Pure distribution entry points (no PyQt, no I/O).

Wraps the domain engine:
  - perform_balanced_distribution: meter groups -> balanced transformer plan
  - calculate_final_connections: balanced plan -> physical LV connections
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from core.config import DEFAULT_CONFIG, BalancingConfig
from core.models.connections import FinalConnection
from core.models.distribution import DistributionResults, MeterGroup, Transformer
from domain import connections as _connections
from domain.expansion import expand_meter_groups
from domain.placement import place_meters
from domain.rebalance import balance_transformer_internally, consolidate_breakers
from domain.stats import summarize
from domain.workspace import AllocationWorkspace

log = logging.getLogger(__name__)


def perform_balanced_distribution(
    meter_groups: Iterable[MeterGroup],
    config: Optional[BalancingConfig] = None,
) -> DistributionResults:
    """Assign every meter to a transformer breaker.

    Raises core.types.AllocationError if some meter cannot be hosted; soft
    overloads are reported in ``summary.issues`` instead.
    """
    cfg = config or DEFAULT_CONFIG
    groups: List[MeterGroup] = list(meter_groups or [])
    total_load = float(sum(g.total_cdl for g in groups))

    ws = AllocationWorkspace(cfg)
    meters = expand_meter_groups(groups)
    place_meters(ws, meters)
    ws.recompute_all()

    moves = sum(balance_transformer_internally(ws, tr) for tr in ws.transformers)
    if cfg.consolidate:
        moves += consolidate_breakers(ws)

    transformers = ws.finalize()
    summary = summarize(transformers, groups, total_load, cfg)
    log.info(
        "Distributed %s meter(s), %.1fA over %s transformer(s) [%s], balance=%.1f, %s rebalancing move(s)",
        len(meters), total_load, summary.total_transformers, summary.transformer_details or "-",
        summary.balance_score, moves,
    )
    return DistributionResults(
        total_load=total_load,
        transformers=transformers,
        balance_score=summary.balance_score,
        summary=summary,
    )


def calculate_final_connections(
    transformers: Sequence[Transformer],
    config: Optional[BalancingConfig] = None,
) -> List[FinalConnection]:
    return _connections.calculate_final_connections(list(transformers or []), config or DEFAULT_CONFIG)
