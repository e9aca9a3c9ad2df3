# domain/meter_catalog.py
"""Meter type catalog and MeterGroup builder.

Demand and coincidence factors turn a row of identical meters into its
coincident demand load (CDL)::

    total_cdl = count * capacity * demand_factor * coincidence_factor
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from core.models.distribution import MeterGroup

MIXED = "Mixed"


@dataclass(frozen=True)
class MeterType:
    code: str
    name: str
    demand_factor: float


METER_TYPES: Dict[str, MeterType] = {
    t.code: t
    for t in (
        MeterType("C1", "Residential", 0.5),
        MeterType("C2", "Retail shops", 0.6),
        MeterType("C3", "Furnished apartments / worker housing", 0.6),
        MeterType("C4", "Hotels", 0.65),
        MeterType("C5", "Malls / shopping centers", 0.6),
        MeterType("C6", "Restaurants / cafes", 0.6),
        MeterType("C7", "Offices (government/commercial)", 0.6),
        MeterType("C8", "Schools / nurseries", 0.7),
        MeterType("C9", "Mosques", 0.8),
        MeterType("C10", "Hotel mezzanine", 0.65),
        MeterType("C11", "Shared building services", 0.7),
        MeterType("C12", "Public utilities", 0.65),
        MeterType("C13", "Indoor parking", 0.7),
        MeterType("C14", "Outdoor parking", 0.8),
        MeterType("C15", "Street lighting", 0.8),
        MeterType("C16", "Gardens and parks", 0.7),
        MeterType("C17", "Open plazas", 0.8),
        MeterType("C18", "Hospitals / medical facilities", 0.7),
        MeterType("C19", "Medical clinics", 0.6),
        MeterType("C20", "Universities / institutes", 0.7),
        MeterType("C21", "Light industry", 0.8),
        MeterType("C22", "Workshops", 0.8),
        MeterType("C23", "Cold stores", 0.8),
        MeterType("C24", "Warehouses", 0.6),
        MeterType("C25", "Event halls", 0.7),
        MeterType("C26", "Entertainment venues", 0.7),
        MeterType("C27", "Farms / agricultural facilities", 0.8),
        MeterType("C28", "Fuel stations", 0.6),
        MeterType("C29", "Large factories", 0.8),
    )
}

LOAD_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "Residential": ("C1", "C3"),
    "Commercial": ("C2", "C4", "C5", "C6", "C7"),
    "Public": ("C8", "C9", "C18", "C19", "C20", "C25", "C26"),
    "Infrastructure": ("C11", "C12", "C13", "C14", "C15", "C16", "C17"),
    "Industrial": ("C21", "C22", "C23", "C24", "C27", "C28", "C29"),
}

TIME_PATTERNS: Dict[str, Tuple[str, ...]] = {
    "Daytime": ("C2", "C7", "C8", "C19", "C20", "C22"),
    "Nighttime": ("C1", "C3", "C4", "C6", "C25", "C26"),
    "Mixed": ("C5", "C9", "C11", "C18", "C21", "C23", "C24", "C27", "C28", "C29"),
    "Continuous": ("C12", "C13", "C14", "C15", "C16", "C17"),
}

METER_CAPACITIES: Tuple[int, ...] = (20, 30, 40, 50, 70, 100, 125, 150, 200, 250, 300, 400, 500, 600, 800, 1600, 2500)

SAMPLE_ROWS: Tuple[Dict[str, Any], ...] = (
    {"type": "C1", "count": 35, "capacity": 30},
    {"type": "C2", "count": 25, "capacity": 70},
    {"type": "C1", "count": 30, "capacity": 50},
    {"type": "C6", "count": 15, "capacity": 100},
    {"type": "C3", "count": 20, "capacity": 40},
    {"type": "C7", "count": 18, "capacity": 50},
)


def _lookup(table: Mapping[str, Tuple[str, ...]], code: str) -> str:
    for label, codes in table.items():
        if code in codes:
            return label
    return MIXED


def category_for(code: str) -> str:
    return _lookup(LOAD_CATEGORIES, code)


def time_pattern_for(code: str) -> str:
    return _lookup(TIME_PATTERNS, code)


def coincidence_factor(count: int, code: str) -> float:
    """Diversity between meters of one group; retail shops are assumed coincident."""
    if code == "C2" or count == 1:
        return 1.0
    return (0.67 + (0.33 / math.sqrt(count))) / 1.25


def build_meter_group(code: str, count: int, capacity: float, group_id: str) -> MeterGroup:
    if code not in METER_TYPES:
        raise ValueError(f"Unknown meter type {code!r}")
    count = int(count)
    if count <= 0:
        raise ValueError(f"Meter count must be positive (got {count})")
    capacity = float(capacity)
    if capacity <= 0:
        raise ValueError(f"Meter capacity must be positive (got {capacity})")

    mtype = METER_TYPES[code]
    cf = coincidence_factor(count, code)
    total_cdl = count * capacity * mtype.demand_factor * cf
    return MeterGroup(
        id=str(group_id),
        type=code,
        type_name=mtype.name,
        count=count,
        capacity=capacity,
        demand_factor=mtype.demand_factor,
        coincidence_factor=cf,
        cdl_per_meter=total_cdl / count,
        total_cdl=total_cdl,
        category=category_for(code),
        time_pattern=time_pattern_for(code),
    )


def build_meter_groups(rows: Iterable[Mapping[str, Any]]) -> List[MeterGroup]:
    """Build groups from ``{"type", "count", "capacity"}`` rows, ids ``G1``, ``G2``..."""
    groups: List[MeterGroup] = []
    for idx, row in enumerate(rows, start=1):
        gid = str(row.get("id") or f"G{idx}")
        groups.append(build_meter_group(str(row.get("type", "")).strip().upper(), row.get("count", 0), row.get("capacity", 0), gid))
    return groups


def sample_meter_groups() -> List[MeterGroup]:
    return build_meter_groups(SAMPLE_ROWS)
