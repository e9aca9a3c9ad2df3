# -*- coding: utf-8 -*-
"""Models for final LV connections."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from core.models.distribution import IndividualMeter, Transformer


class FeedSource(str, Enum):
    DP = "DP"  # distribution panel
    SS = "SS"  # substation


class MeterTier(str, Enum):
    HEAVY = "heavy"  # >= 300 A, direct from SS
    MEDIUM = "medium"  # 200/250 A, CT metered from DP
    LIGHT = "light"  # <= 150 A, grouped on shared DP outlets


@dataclass(frozen=True)
class ConnectionConfig:
    source: FeedSource
    fuses: int
    customer_cable_count: int
    customer_cable_size: str
    main_feeder_info: str


@dataclass(frozen=True)
class LogicalBreaker:
    """One breaker, or two breakers re-joined because they carry a split meter."""

    key: str
    transformer: Transformer
    numbers: Tuple[int, ...]
    meters: Tuple[IndividualMeter, ...]

    @property
    def label(self) -> str:
        return " & ".join(str(n) for n in self.numbers)

    @property
    def leading_number(self) -> int:
        return self.numbers[0]


@dataclass(frozen=True)
class FinalConnection:
    id: str
    transformer_id: int
    transformer_name: str
    breaker_number: str
    tier: MeterTier
    total_cdl: float
    meters: Tuple[IndividualMeter, ...]
    meter_boxes: str
    configuration: ConnectionConfig
    dp_outlet_number: Optional[str] = None
