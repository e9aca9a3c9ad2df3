# -*- coding: utf-8 -*-
"""Models for meter distribution (groups, meters, breakers, transformers)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Set, Tuple, Union

from core.catalog import TransformerType
from core.types import Issue


@dataclass(frozen=True)
class MeterGroup:
    """One input row: ``count`` identical meters of a given type and rating.

    The builder guarantees ``cdl_per_meter * count == total_cdl``.
    """

    id: str
    type: str
    type_name: str
    count: int
    capacity: float
    demand_factor: float
    coincidence_factor: float
    cdl_per_meter: float
    total_cdl: float
    category: str
    time_pattern: str


@dataclass(frozen=True)
class Whole:
    id: str

    @property
    def base_id(self) -> str:
        return self.id

    @property
    def key(self) -> str:
        return self.id


@dataclass(frozen=True)
class SplitHalf:
    base_id: str
    half: int  # 1 or 2

    @property
    def key(self) -> str:
        return f"{self.base_id}_p{self.half}"


MeterIdentity = Union[Whole, SplitHalf]

SPLIT_NOTES = {1: "part 1", 2: "part 2"}


@dataclass(frozen=True)
class IndividualMeter:
    identity: MeterIdentity
    group_id: str
    type: str
    type_name: str
    capacity: float
    demand_factor: float
    coincidence_factor: float
    category: str
    time_pattern: str
    cdl: float
    note: Optional[str] = None

    @property
    def key(self) -> str:
        return self.identity.key

    @property
    def base_id(self) -> str:
        return self.identity.base_id

    @property
    def is_split_half(self) -> bool:
        return isinstance(self.identity, SplitHalf)

    @property
    def half(self) -> Optional[int]:
        return self.identity.half if isinstance(self.identity, SplitHalf) else None

    def split(self) -> Tuple["IndividualMeter", "IndividualMeter"]:
        half_cdl = self.cdl / 2.0
        return tuple(
            replace(self, identity=SplitHalf(self.base_id, n), cdl=half_cdl, note=SPLIT_NOTES[n])
            for n in (1, 2)
        )

    def rejoin(self, other: "IndividualMeter") -> "IndividualMeter":
        """Rebuild the original meter from both halves of a split."""
        if not (self.is_split_half and other.is_split_half) or self.base_id != other.base_id:
            raise ValueError(f"{self.key} and {other.key} are not halves of the same meter")
        return replace(self, identity=Whole(self.base_id), cdl=self.cdl + other.cdl, note=None)


@dataclass(eq=False)
class Breaker:
    """Capacity slot inside a transformer.

    ``load`` and the descriptive sets are derived; change membership only via
    :meth:`commit`, which recomputes them immediately.
    """

    id: int
    number: int
    rating_a: float
    meters: List[IndividualMeter] = field(default_factory=list)
    load: float = 0.0
    utilization_percent: float = 0.0
    meter_types: Set[str] = field(default_factory=set)
    categories: Set[str] = field(default_factory=set)
    time_patterns: Set[str] = field(default_factory=set)
    dedicated: bool = False
    dedicated_for: Optional[str] = None
    dedicated_capacity: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return not self.meters

    @property
    def effective_capacity(self) -> float:
        if self.dedicated and self.dedicated_capacity and len(self.meters) == 1:
            return float(self.dedicated_capacity)
        return float(self.rating_a)

    def commit(self, add: Iterable[IndividualMeter] = (), remove: Iterable[IndividualMeter] = ()) -> None:
        add = list(add)
        if add and self.dedicated:
            raise ValueError(f"Breaker {self.number} is dedicated ({self.dedicated_for}); cannot add meters")
        for meter in remove:
            for idx, m in enumerate(self.meters):
                if m.key == meter.key:
                    del self.meters[idx]
                    break
            else:
                raise ValueError(f"Meter {meter.key} is not on breaker {self.number}")
        self.meters.extend(add)
        self.recompute()

    def dedicate(self, reason: str, capacity: Optional[float] = None) -> None:
        self.dedicated = True
        self.dedicated_for = reason
        self.dedicated_capacity = capacity
        self.recompute()

    def recompute(self) -> None:
        self.load = float(sum(m.cdl for m in self.meters))
        cap = self.effective_capacity
        self.utilization_percent = (self.load / cap) * 100.0 if cap > 0 else 0.0
        self.meter_types = {m.type_name for m in self.meters}
        self.categories = {m.category for m in self.meters}
        self.time_patterns = {m.time_pattern for m in self.meters}


@dataclass(eq=False)
class Transformer:
    id: int
    type: TransformerType
    breakers: List[Breaker]
    assigned_load: float = 0.0
    is_dedicated: bool = False
    dedicated_for: Optional[str] = None
    dedicated_capacity: Optional[float] = None

    @classmethod
    def create(cls, ttype: TransformerType, tid: int, breaker_rating_a: float) -> "Transformer":
        breakers = [Breaker(id=i + 1, number=i + 1, rating_a=breaker_rating_a) for i in range(ttype.breakers)]
        return cls(id=tid, type=ttype, breakers=breakers)

    @property
    def safe_capacity(self) -> float:
        if self.is_dedicated and self.dedicated_capacity:
            return float(self.dedicated_capacity)
        return float(self.type.safe_load)

    @property
    def active_breakers(self) -> List[Breaker]:
        return [b for b in self.breakers if b.meters]

    @property
    def is_active(self) -> bool:
        return any(b.meters for b in self.breakers)

    def recompute(self) -> None:
        for b in self.breakers:
            b.recompute()
        self.assigned_load = float(sum(b.load for b in self.breakers))


@dataclass(frozen=True)
class DistributionSummary:
    total_transformers: int
    total_breakers: int
    distribution_entries: int
    total_meters: int
    total_load: float
    total_load_kva: float
    overloaded_breakers: int
    overloaded_transformers: int
    max_utilization: float
    min_utilization: float
    avg_utilization: float
    balance_score: float
    efficiency: float
    capacity_tally: Tuple[Tuple[int, int], ...]
    transformer_details: str
    issues: Tuple[Issue, ...] = ()


@dataclass(frozen=True)
class DistributionResults:
    total_load: float
    transformers: Tuple[Transformer, ...]
    balance_score: float
    summary: DistributionSummary
