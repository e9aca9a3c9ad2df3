# domain/expansion.py
from __future__ import annotations

from typing import Iterable, List

from core.models.distribution import IndividualMeter, MeterGroup, Whole


def expand_meter_groups(groups: Iterable[MeterGroup]) -> List[IndividualMeter]:
    """One IndividualMeter per physical meter, ids ``{group.id}_{index}``."""
    meters: List[IndividualMeter] = []
    for g in groups:
        for i in range(int(g.count)):
            meters.append(
                IndividualMeter(
                    identity=Whole(f"{g.id}_{i}"),
                    group_id=g.id,
                    type=g.type,
                    type_name=g.type_name,
                    capacity=float(g.capacity),
                    demand_factor=float(g.demand_factor),
                    coincidence_factor=float(g.coincidence_factor),
                    category=g.category,
                    time_pattern=g.time_pattern,
                    cdl=float(g.cdl_per_meter),
                )
            )
    return meters
