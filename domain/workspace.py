# domain/workspace.py
"""Allocation workspace: owns every transformer and breaker of one run.

All membership changes go through this object so transformer loads are never
read stale. A workspace is built per call and discarded afterwards.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Tuple

from core.catalog import TransformerType
from core.config import BalancingConfig
from core.models.distribution import Breaker, IndividualMeter, Transformer

log = logging.getLogger(__name__)


class AllocationWorkspace:
    def __init__(self, config: BalancingConfig) -> None:
        self.config = config
        self.transformers: List[Transformer] = []
        self._owner: Dict[Breaker, Transformer] = {}
        self._next_id = 1

    @property
    def breaker_ceiling(self) -> float:
        return self.config.breaker_safe_capacity

    def new_transformer(self, ttype: TransformerType) -> Transformer:
        tr = Transformer.create(ttype, self._next_id, self.config.breaker_rating_a)
        self._next_id += 1
        self.transformers.append(tr)
        for b in tr.breakers:
            self._owner[b] = tr
        log.debug("Created transformer %s (%s)", tr.id, ttype.name)
        return tr

    def owner_of(self, breaker: Breaker) -> Transformer:
        return self._owner[breaker]

    def iter_breakers(self) -> Iterator[Tuple[Transformer, Breaker]]:
        for tr in self.transformers:
            for b in tr.breakers:
                yield tr, b

    def place(self, breaker: Breaker, meters: Iterable[IndividualMeter]) -> None:
        breaker.commit(add=meters)
        self.owner_of(breaker).recompute()

    def move(self, meter: IndividualMeter, src: Breaker, dst: Breaker) -> None:
        src.commit(remove=[meter])
        dst.commit(add=[meter])
        src_tr = self.owner_of(src)
        dst_tr = self.owner_of(dst)
        src_tr.recompute()
        if dst_tr is not src_tr:
            dst_tr.recompute()
        log.debug("Moved %s (%.1fA) T%s/B%s -> T%s/B%s", meter.key, meter.cdl, src_tr.id, src.number, dst_tr.id, dst.number)

    def recompute_all(self) -> None:
        for tr in self.transformers:
            tr.recompute()

    def finalize(self) -> Tuple[Transformer, ...]:
        """Drop empty transformers, renumber the rest densely and refresh stats."""
        active = [tr for tr in self.transformers if tr.is_active]
        dropped = len(self.transformers) - len(active)
        if dropped:
            log.debug("Dropping %s empty transformer(s)", dropped)
        for idx, tr in enumerate(active, start=1):
            tr.id = idx
        self.transformers = active
        self.recompute_all()
        return tuple(active)
