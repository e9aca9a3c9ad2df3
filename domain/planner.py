# domain/planner.py
"""Transformer type selection.

The engine plans one transformer at a time against the *remaining* load
(:func:`select_transformer_type`); :func:`plan_transformers` gives the upfront
sequence for a total load and is used for sizing previews only.
"""
from __future__ import annotations

from typing import List, Sequence

from core.catalog import TransformerType, find_type
from core.config import BalancingConfig


def _ascending(types: Sequence[TransformerType]) -> List[TransformerType]:
    if not types:
        raise ValueError("Transformer catalog is empty")
    return sorted(types, key=lambda t: t.safe_load)


def select_transformer_type(load: float, types: Sequence[TransformerType]) -> TransformerType:
    """Smallest type whose safe load covers ``load``; the largest one otherwise."""
    ordered = _ascending(types)
    for t in ordered:
        if t.safe_load >= load:
            return t
    return ordered[-1]


def plan_transformers(load: float, types: Sequence[TransformerType]) -> List[TransformerType]:
    ordered = _ascending(types)
    largest = ordered[-1]
    plan: List[TransformerType] = []
    remaining = float(load)
    while remaining > largest.safe_load:
        plan.append(largest)
        remaining -= largest.safe_load
    if remaining > 0 or not plan:
        plan.append(select_transformer_type(remaining, ordered))
    return plan


def dedicated_type_for(capacity: float, config: BalancingConfig) -> TransformerType:
    mapped = config.dedicated_type_by_capacity.get(int(capacity))
    if mapped is not None:
        return find_type(mapped, config.transformer_types)
    by_current = sorted(config.transformer_types, key=lambda t: t.max_current)
    for t in by_current:
        if t.max_current >= capacity:
            return t
    return by_current[-1]
