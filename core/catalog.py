# -*- coding: utf-8 -*-
"""Standard equipment catalog (transformers and breaker ratings).

Values are shared by reference: every Transformer of a given type points at the
same TransformerType instance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class TransformerType:
    capacity: int  # kVA
    max_current: float  # A
    breakers: int
    name: str
    max_load: float
    safe_load: float
    min_load: float


TRANSFORMER_TYPES: Tuple[TransformerType, ...] = (
    TransformerType(capacity=500, max_current=721, breakers=4, name="500 KVA",
                    max_load=576.80, safe_load=576.80, min_load=216),
    TransformerType(capacity=1000, max_current=1443, breakers=8, name="1000 KVA",
                    max_load=1154.40, safe_load=1154.40, min_load=433),
    TransformerType(capacity=1500, max_current=2164, breakers=10, name="1500 KVA",
                    max_load=2164.20, safe_load=1731.20, min_load=800),
)

# Breaker nameplate rating and the fraction of it we plan against.
BREAKER_RATING_A = 310.0
BREAKER_SAFE_FACTOR = 0.8

# Meter capacities that get a transformer of their own, and the type they get.
DEDICATED_TYPE_BY_CAPACITY = {
    1600: 1000,
    2500: 1500,
}


def find_type(capacity_kva: int, types: Tuple[TransformerType, ...] = TRANSFORMER_TYPES) -> TransformerType:
    for t in types:
        if t.capacity == capacity_kva:
            return t
    raise KeyError(f"No transformer type with capacity {capacity_kva} kVA")
