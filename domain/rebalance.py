# domain/rebalance.py
"""Post-placement local search.

Both passes are greedy and bounded by fixed iteration counts so they always
terminate, whatever the input size.
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

from core.models.distribution import Breaker, IndividualMeter, Transformer
from domain.workspace import AllocationWorkspace

log = logging.getLogger(__name__)

_EPS = 1e-9


def balance_transformer_internally(ws: AllocationWorkspace, transformer: Transformer) -> int:
    """Move meters from the heaviest to the lightest breaker. Returns the number of moves."""
    if transformer.is_dedicated:
        return 0
    cfg = ws.config
    ceiling = ws.breaker_ceiling
    moves = 0
    for _ in range(cfg.rebalance_rounds):
        breakers = sorted(
            (b for b in transformer.breakers if b.meters and not b.dedicated),
            key=lambda b: b.load,
        )
        if len(breakers) < 2:
            break
        lightest, heaviest = breakers[0], breakers[-1]
        if heaviest.load - lightest.load < cfg.rebalance_threshold_a:
            break

        movable = next(
            (m for m in sorted(heaviest.meters, key=lambda m: m.cdl) if lightest.load + m.cdl <= ceiling + _EPS),
            None,
        )
        if movable is None:
            break
        ws.move(movable, heaviest, lightest)
        moves += 1
    return moves


def _is_consolidation_candidate(breaker: Breaker, ws: AllocationWorkspace) -> bool:
    cfg = ws.config
    if breaker.dedicated or len(breaker.meters) != 1:
        return False
    meter = breaker.meters[0]
    if meter.is_split_half:
        return False
    return cfg.consolidation_min_capacity <= meter.capacity <= cfg.consolidation_max_capacity


def _find_consolidation_move(ws: AllocationWorkspace) -> Optional[Tuple[IndividualMeter, Breaker, Breaker]]:
    ceiling = ws.breaker_ceiling
    for src_tr, src in ws.iter_breakers():
        if src_tr.is_dedicated or not _is_consolidation_candidate(src, ws):
            continue
        meter = src.meters[0]
        best: Optional[Breaker] = None
        for dst_tr, dst in ws.iter_breakers():
            if dst is src or dst_tr.is_dedicated or dst.dedicated or not dst.meters:
                continue
            if dst.load + meter.cdl > ceiling + _EPS:
                continue
            if dst_tr is not src_tr and dst_tr.assigned_load + meter.cdl > dst_tr.safe_capacity + _EPS:
                continue
            if best is None or dst.load < best.load:
                best = dst
        if best is not None:
            return meter, src, best
    return None


def consolidate_breakers(ws: AllocationWorkspace) -> int:
    """Empty single-meter breakers by moving their meter onto an occupied one."""
    moves = 0
    while moves < ws.config.consolidation_max_moves:
        found = _find_consolidation_move(ws)
        if found is None:
            break
        meter, src, dst = found
        ws.move(meter, src, dst)
        moves += 1
    if moves:
        log.info("Consolidation freed %s breaker(s)", moves)
    return moves
