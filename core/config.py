# -*- coding: utf-8 -*-
"""Balancing configuration.

Every constant the engine uses lives here so a run can be reproduced from one
object. Defaults match the standard catalog; ``infra.settings`` may override
individual fields from the user's settings file.

Scoring weights
---------------
Normal meters are scored per candidate breaker as::

    (target_base - |new_load - target_load|) * target_weight
    + (balance_base - stddev) * balance_weight
    + diversity_bonus (category not yet on the breaker)
    + (fill_base - breaker.load) * fill_weight

The numbers were tuned empirically; keep them configurable rather than derived.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping, Tuple

from core.catalog import (
    BREAKER_RATING_A,
    BREAKER_SAFE_FACTOR,
    DEDICATED_TYPE_BY_CAPACITY,
    TRANSFORMER_TYPES,
    TransformerType,
)


@dataclass(frozen=True)
class BalancingConfig:
    breaker_rating_a: float = BREAKER_RATING_A
    breaker_safe_factor: float = BREAKER_SAFE_FACTOR

    # Meter classes by rated capacity (A)
    split_min_capacity: float = 400.0
    dedicated_min_capacity: float = 1600.0
    dedicated_type_by_capacity: Mapping[int, int] = field(
        default_factory=lambda: dict(DEDICATED_TYPE_BY_CAPACITY)
    )

    # Scoring
    target_base: float = 1000.0
    target_weight: float = 1.0
    balance_base: float = 50.0
    balance_weight: float = 10.0
    diversity_bonus: float = 25.0
    fill_base: float = 50.0
    fill_weight: float = 1.0

    # Internal rebalancing
    rebalance_rounds: int = 5
    rebalance_threshold_a: float = 20.0

    # Consolidation (optional variant)
    consolidate: bool = False
    consolidation_max_moves: int = 20
    consolidation_min_capacity: float = 20.0
    consolidation_max_capacity: float = 300.0

    # Connection resolving
    light_bin_ceiling_a: float = 248.0
    heavy_min_capacity: float = 300.0
    medium_min_capacity: float = 200.0

    # Reporting
    kva_factor: float = 0.4 * 1.73
    overload_tolerance: float = 0.01

    transformer_types: Tuple[TransformerType, ...] = TRANSFORMER_TYPES

    @property
    def breaker_safe_capacity(self) -> float:
        return self.breaker_rating_a * self.breaker_safe_factor

    def sorted_types(self) -> Tuple[TransformerType, ...]:
        """Catalog sorted ascending by safe load."""
        return tuple(sorted(self.transformer_types, key=lambda t: t.safe_load))


DEFAULT_CONFIG = BalancingConfig()

# Fields that can be set from a flat JSON/dict of scalars.
_SCALAR_FIELDS = {
    f.name for f in fields(BalancingConfig)
    if f.name not in ("dedicated_type_by_capacity", "transformer_types")
}


def config_from_overrides(overrides: Mapping[str, Any], base: BalancingConfig = DEFAULT_CONFIG) -> Tuple[BalancingConfig, Dict[str, Any]]:
    """Apply scalar overrides on top of ``base``.

    Returns ``(config, ignored)`` where ``ignored`` holds keys that are unknown
    or whose value could not be converted to the field's type.
    """
    changes: Dict[str, Any] = {}
    ignored: Dict[str, Any] = {}
    for key, raw in (overrides or {}).items():
        if key not in _SCALAR_FIELDS:
            ignored[key] = raw
            continue
        current = getattr(base, key)
        try:
            if isinstance(current, bool):
                if not isinstance(raw, bool):
                    raise TypeError(f"{key} expects a boolean")
                value = raw
            elif isinstance(current, int):
                value = int(raw)
            else:
                value = float(raw)
        except (TypeError, ValueError):
            ignored[key] = raw
            continue
        changes[key] = value
    return replace(base, **changes), ignored
