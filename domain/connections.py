# domain/connections.py
"""Final LV connections derived from a balanced plan.

Split meters are re-joined first, so each physical meter is wired exactly once
with its full CDL. Then every logical breaker is broken down by meter tier:

- heavy  (>= 300 A): own connection, fed directly from the substation (SS);
- medium (200/250 A): own CT-metered connection from the distribution panel (DP);
- light  (<= 150 A): best-fit packed onto shared DP outlets.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from core.config import BalancingConfig
from core.models.connections import (
    ConnectionConfig,
    FeedSource,
    FinalConnection,
    LogicalBreaker,
    MeterTier,
)
from core.models.distribution import Breaker, IndividualMeter, Transformer

log = logging.getLogger(__name__)

SS_CABLE_AMPACITY = 248.0
DP_MAIN_FEEDER = "1x 300 mm²"
SS_MAIN_FEEDER = "Direct Feeder"
CT_BOX_MEDIUM = "1 CT box (200/250A)"


def dp_config(cdl: float) -> ConnectionConfig:
    if cdl <= 108:
        fuses, cables, size = 1, 1, "70 mm²"
    elif cdl <= 184:
        fuses, cables, size = 1, 1, "185 mm²"
    elif cdl <= 216:
        fuses, cables, size = 2, 2, "70 mm²"
    else:
        fuses, cables, size = 2, 2, "185 mm²"
    return ConnectionConfig(FeedSource.DP, fuses, cables, size, DP_MAIN_FEEDER)


def ss_config(cdl: float) -> ConnectionConfig:
    if cdl <= SS_CABLE_AMPACITY:
        cables = 1
    elif cdl <= 2 * SS_CABLE_AMPACITY:
        cables = 2
    else:
        cables = math.ceil(cdl / SS_CABLE_AMPACITY)
    return ConnectionConfig(FeedSource.SS, cables, cables, "300 mm²", SS_MAIN_FEEDER)


def heavy_meter_box(capacity: float) -> str:
    if capacity <= 400:
        return "1 CT box (300/400A)"
    if capacity <= 600:
        return "1 CT box (500/600A)"
    if capacity >= 800:
        return "1 CT box (remote)"
    return "1 CT box (dedicated)"


def meter_tier(meter: IndividualMeter, config: BalancingConfig) -> MeterTier:
    if meter.capacity >= config.heavy_min_capacity:
        return MeterTier.HEAVY
    if meter.capacity >= config.medium_min_capacity:
        return MeterTier.MEDIUM
    return MeterTier.LIGHT


def logical_breakers(transformers: Sequence[Transformer]) -> List[LogicalBreaker]:
    """Re-join breakers that carry the two halves of a split meter."""
    result: List[LogicalBreaker] = []
    consumed: set = set()

    for tr in transformers:
        first_halves: Dict[str, Tuple[Breaker, IndividualMeter]] = {}
        for b in tr.breakers:
            for m in b.meters:
                if m.half == 1:
                    first_halves[m.base_id] = (b, m)

        for b2 in tr.breakers:
            if b2 in consumed:
                continue
            second = next((m for m in b2.meters if m.half == 2), None)
            if second is None or second.base_id not in first_halves:
                continue
            b1, first = first_halves[second.base_id]
            consumed.add(b1)
            consumed.add(b2)
            meters = (
                first.rejoin(second),
                *(m for m in b1.meters if m is not first),
                *(m for m in b2.meters if m is not second),
            )
            result.append(LogicalBreaker(key=second.base_id, transformer=tr, numbers=(b1.number, b2.number), meters=meters))

        for b in tr.breakers:
            if b in consumed or not b.meters:
                continue
            result.append(LogicalBreaker(key=f"t{tr.id}-b{b.id}", transformer=tr, numbers=(b.number,), meters=tuple(b.meters)))

    result.sort(key=lambda lb: (lb.transformer.id, lb.leading_number))
    return result


@dataclass
class _Bin:
    meters: List[IndividualMeter] = field(default_factory=list)
    load: float = 0.0


def pack_light_meters(meters: Sequence[IndividualMeter], ceiling: float) -> List[_Bin]:
    """Best-fit decreasing: each meter goes to the open bin it leaves fullest."""
    bins: List[_Bin] = []
    for meter in sorted(meters, key=lambda m: m.cdl, reverse=True):
        best: Optional[_Bin] = None
        best_room = math.inf
        for b in bins:
            room = ceiling - b.load
            if meter.cdl <= room and room < best_room:
                best_room = room
                best = b
        if best is None:
            best = _Bin()
            bins.append(best)
        best.meters.append(meter)
        best.load += meter.cdl
    return bins


class _OutletCounter:
    def __init__(self) -> None:
        self._next = 1

    def take(self, config: ConnectionConfig) -> str:
        start = self._next
        if config.customer_cable_count == 2:
            self._next += 2
            return f"{start} & {start + 1}"
        self._next += 1
        return str(start)


def _connections_for(lb: LogicalBreaker, config: BalancingConfig) -> List[FinalConnection]:
    tr = lb.transformer
    base = f"t{tr.id}-b{'-'.join(str(n) for n in lb.numbers)}"
    name = f"Transformer {tr.id}"
    out: List[FinalConnection] = []

    by_tier: Dict[MeterTier, List[IndividualMeter]] = {t: [] for t in MeterTier}
    for m in lb.meters:
        by_tier[meter_tier(m, config)].append(m)

    for m in by_tier[MeterTier.HEAVY]:
        out.append(FinalConnection(
            id=f"{base}-m{m.key}",
            transformer_id=tr.id,
            transformer_name=name,
            breaker_number=lb.label,
            tier=MeterTier.HEAVY,
            total_cdl=m.cdl,
            meters=(m,),
            meter_boxes=heavy_meter_box(m.capacity),
            configuration=ss_config(m.cdl),
        ))

    outlets = _OutletCounter()
    for b in pack_light_meters(by_tier[MeterTier.LIGHT], config.light_bin_ceiling_a):
        cfg = dp_config(b.load)
        outlet = outlets.take(cfg)
        boxes = math.ceil(len(b.meters) / 2)
        out.append(FinalConnection(
            id=f"{base}-o{outlet.replace(' & ', '-')}",
            transformer_id=tr.id,
            transformer_name=name,
            breaker_number=lb.label,
            tier=MeterTier.LIGHT,
            total_cdl=b.load,
            meters=tuple(b.meters),
            meter_boxes=f"{boxes} double meter box{'es' if boxes != 1 else ''}",
            configuration=cfg,
            dp_outlet_number=outlet,
        ))

    for m in sorted(by_tier[MeterTier.MEDIUM], key=lambda m: m.cdl, reverse=True):
        cfg = dp_config(m.cdl)
        out.append(FinalConnection(
            id=f"{base}-m{m.key}",
            transformer_id=tr.id,
            transformer_name=name,
            breaker_number=lb.label,
            tier=MeterTier.MEDIUM,
            total_cdl=m.cdl,
            meters=(m,),
            meter_boxes=CT_BOX_MEDIUM,
            configuration=cfg,
            dp_outlet_number=outlets.take(cfg),
        ))
    return out


def calculate_final_connections(transformers: Sequence[Transformer], config: BalancingConfig) -> List[FinalConnection]:
    connections: List[FinalConnection] = []
    for lb in logical_breakers(transformers):
        connections.extend(_connections_for(lb, config))
    log.debug("Resolved %s connection(s) over %s transformer(s)", len(connections), len(transformers))
    return connections
