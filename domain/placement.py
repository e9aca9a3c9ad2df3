# domain/placement.py
"""Placement engine: assigns every individual meter to a transformer breaker.

Order of work:
  1. meters >= the dedicated threshold get a transformer of their own;
  2. the general pool is filled transformer by transformer, each new
     transformer sized to the load still waiting;
  3. inside a transformer, split meters take a pair of breakers first, then
     normal meters are scored onto the lightest sensible breaker.
"""
from __future__ import annotations

import logging
import math
import statistics
from typing import List, Optional, Sequence, Tuple

from core.config import BalancingConfig
from core.models.distribution import Breaker, IndividualMeter, Transformer
from core.types import AllocationError
from domain.planner import dedicated_type_for, select_transformer_type
from domain.workspace import AllocationWorkspace

log = logging.getLogger(__name__)

_EPS = 1e-9


def is_dedicated_meter(meter: IndividualMeter, config: BalancingConfig) -> bool:
    return meter.capacity >= config.dedicated_min_capacity


def needs_split(meter: IndividualMeter, config: BalancingConfig) -> bool:
    if is_dedicated_meter(meter, config):
        return False
    return meter.capacity >= config.split_min_capacity or meter.cdl > config.breaker_safe_capacity + _EPS


def queue_order(meters: Sequence[IndividualMeter], config: BalancingConfig) -> List[IndividualMeter]:
    """Split meters first, then heaviest first. Stable for equal keys."""
    return sorted(meters, key=lambda m: (not needs_split(m, config), -m.cdl))


def place_dedicated(ws: AllocationWorkspace, meter: IndividualMeter) -> Transformer:
    ttype = dedicated_type_for(meter.capacity, ws.config)
    reason = f"{meter.capacity:g}A meter"
    tr = ws.new_transformer(ttype)
    tr.is_dedicated = True
    tr.dedicated_for = reason
    tr.dedicated_capacity = meter.capacity
    main = tr.breakers[0]
    ws.place(main, [meter])
    main.dedicate(reason, capacity=meter.capacity)
    tr.recompute()
    log.debug("Dedicated transformer %s (%s) for %s", tr.id, ttype.name, meter.key)
    return tr


def _fits_half(breaker: Breaker, half: float, ceiling: float) -> bool:
    if breaker.dedicated:
        return False
    if half > ceiling + _EPS:
        # Oversized half: only as the sole occupant of an empty breaker.
        return breaker.is_empty
    return breaker.load + half <= ceiling + _EPS


def find_best_breaker_pair(meter: IndividualMeter, transformer: Transformer, ceiling: float) -> Optional[Tuple[Breaker, Breaker]]:
    half = meter.cdl / 2.0
    slots = [b for b in transformer.breakers if _fits_half(b, half, ceiling)]
    best: Optional[Tuple[Breaker, Breaker]] = None
    best_load = math.inf
    for i in range(len(slots)):
        for j in range(i + 1, len(slots)):
            combined = slots[i].load + slots[j].load
            if combined < best_load:
                best_load = combined
                best = (slots[i], slots[j])
    return best


def place_split(ws: AllocationWorkspace, transformer: Transformer, meter: IndividualMeter) -> bool:
    pair = find_best_breaker_pair(meter, transformer, ws.breaker_ceiling)
    if pair is None:
        return False
    reason = f"split {meter.capacity:g}A meter"
    for breaker, part in zip(pair, meter.split()):
        ws.place(breaker, [part])
        breaker.dedicate(reason)
    if meter.cdl / 2.0 > ws.breaker_ceiling + _EPS:
        log.warning("Split meter %s exceeds the breaker ceiling even halved (%.1fA per half)", meter.base_id, meter.cdl / 2.0)
    log.debug("Split %s over T%s breakers %s & %s", meter.base_id, transformer.id, pair[0].number, pair[1].number)
    return True


def score_breaker(
    breaker: Breaker,
    meter: IndividualMeter,
    targets: Sequence[Breaker],
    target_load: float,
    config: BalancingConfig,
) -> float:
    new_load = breaker.load + meter.cdl
    loads = [b.load for b in targets if b is not breaker] + [new_load]
    spread = statistics.pstdev(loads) if len(loads) > 1 else 0.0

    target_score = (config.target_base - abs(new_load - target_load)) * config.target_weight
    balance_score = (config.balance_base - spread) * config.balance_weight
    diversity_score = config.diversity_bonus if meter.category not in breaker.categories else 0.0
    fill_score = (config.fill_base - breaker.load) * config.fill_weight
    return target_score + balance_score + diversity_score + fill_score


def place_normal_batch(ws: AllocationWorkspace, transformer: Transformer, meters: Sequence[IndividualMeter]) -> List[IndividualMeter]:
    """Score each meter onto the target breakers. Returns the meters that did not fit."""
    if not meters:
        return []
    cfg = ws.config
    ceiling = ws.breaker_ceiling
    available = [b for b in transformer.breakers if not b.dedicated]
    batch_load = sum(m.cdl for m in meters)
    needed = max(1, math.ceil(batch_load / ceiling - _EPS))
    targets = available[:min(needed, len(available))]
    if not targets:
        return list(meters)

    target_load = batch_load / len(targets)
    unplaced: List[IndividualMeter] = []
    for meter in meters:
        best: Optional[Breaker] = None
        best_score = -math.inf
        for breaker in targets:
            if breaker.load + meter.cdl > ceiling + _EPS:
                continue
            score = score_breaker(breaker, meter, targets, target_load, cfg)
            if score > best_score:
                best_score = score
                best = breaker
        if best is None:
            unplaced.append(meter)
        else:
            ws.place(best, [meter])
    return unplaced


def place_meters(ws: AllocationWorkspace, meters: Sequence[IndividualMeter]) -> None:
    cfg = ws.config
    dedicated = [m for m in meters if is_dedicated_meter(m, cfg)]
    queue = queue_order([m for m in meters if not is_dedicated_meter(m, cfg)], cfg)

    for meter in dedicated:
        place_dedicated(ws, meter)

    while queue:
        remaining = sum(m.cdl for m in queue)
        ttype = select_transformer_type(remaining, cfg.transformer_types)
        tr = ws.new_transformer(ttype)

        batch: List[IndividualMeter] = []
        waiting: List[IndividualMeter] = []
        batch_load = 0.0
        for meter in queue:
            if batch_load + meter.cdl <= ttype.safe_load + _EPS:
                batch.append(meter)
                batch_load += meter.cdl
            else:
                waiting.append(meter)
        if not batch:
            raise AllocationError(
                f"Meter {queue[0].key} ({queue[0].cdl:.1f}A) exceeds the largest transformer ({ttype.name})",
                unplaced=[m.key for m in queue],
            )

        unplaced: List[IndividualMeter] = []
        for meter in [m for m in batch if needs_split(m, cfg)]:
            if not place_split(ws, tr, meter):
                unplaced.append(meter)
        unplaced.extend(place_normal_batch(ws, tr, [m for m in batch if not needs_split(m, cfg)]))

        if len(unplaced) == len(batch):
            raise AllocationError(
                f"No breaker of a new {ttype.name} transformer can host the pending meters",
                unplaced=[m.key for m in unplaced + waiting],
            )
        if unplaced:
            log.debug("T%s deferred %s meter(s) to the next transformer", tr.id, len(unplaced))
        log.debug("T%s (%s) took %s meter(s), %.1fA", tr.id, ttype.name, len(batch) - len(unplaced), tr.assigned_load)
        queue = queue_order(waiting + unplaced, cfg)
