# -*- coding: utf-8 -*-
"""End-to-end runs of both engine stages."""
from dataclasses import replace

import pytest

from core.calculations.distribution import calculate_final_connections, perform_balanced_distribution
from core.config import DEFAULT_CONFIG
from core.models.connections import FeedSource, MeterTier
from domain.meter_catalog import build_meter_groups, sample_meter_groups

MIXED_ROWS = [
    {"type": "C29", "count": 1, "capacity": 2500},
    {"type": "C1", "count": 2, "capacity": 400},
    {"type": "C2", "count": 10, "capacity": 70},
    {"type": "C7", "count": 6, "capacity": 200},
    {"type": "C1", "count": 40, "capacity": 30},
]


def _placed(results):
    return [m for t in results.transformers for b in t.breakers for m in b.meters]


def test_single_small_meter():
    groups = build_meter_groups([{"type": "C1", "count": 1, "capacity": 70}])
    results = perform_balanced_distribution(groups)

    assert results.total_load == pytest.approx(35.0)
    assert [t.type.capacity for t in results.transformers] == [500]
    assert results.summary.total_breakers == 1
    assert results.summary.transformer_details == "1x 500 KVA"

    conns = calculate_final_connections(results.transformers)
    assert len(conns) == 1
    c = conns[0]
    assert c.tier == MeterTier.LIGHT
    assert c.configuration.source == FeedSource.DP
    assert (c.configuration.fuses, c.configuration.customer_cable_count, c.configuration.customer_cable_size) == (1, 1, "70 mm²")
    assert c.dp_outlet_number == "1"
    assert c.meter_boxes == "1 double meter box"


def test_dedicated_2500A_meter():
    groups = build_meter_groups([{"type": "C29", "count": 1, "capacity": 2500}])
    results = perform_balanced_distribution(groups)

    (tr,) = results.transformers
    assert tr.type.capacity == 1500
    assert tr.is_dedicated and tr.safe_capacity == 2500
    assert tr.breakers[0].dedicated
    assert results.summary.overloaded_breakers == 0
    assert results.summary.overloaded_transformers == 0

    (c,) = calculate_final_connections(results.transformers)
    assert c.tier == MeterTier.HEAVY
    assert c.configuration.source == FeedSource.SS
    assert c.configuration.customer_cable_count == 9  # ceil(2000 / 248)
    assert c.meter_boxes == "1 CT box (remote)"


def test_600A_meter_split_then_recombined():
    groups = build_meter_groups([{"type": "C1", "count": 1, "capacity": 600}])
    results = perform_balanced_distribution(groups)

    (tr,) = results.transformers
    used = tr.active_breakers
    assert len(used) == 2
    assert all(b.dedicated and b.load == pytest.approx(150.0) for b in used)
    assert sorted(m.note for b in used for m in b.meters) == ["part 1", "part 2"]
    assert results.summary.total_breakers == 2
    assert results.summary.distribution_entries == 1

    (c,) = calculate_final_connections(results.transformers)
    assert c.breaker_number == "1 & 2"
    assert c.total_cdl == pytest.approx(300.0)
    assert [m.key for m in c.meters] == ["G1_0"]
    assert c.configuration.source == FeedSource.SS
    assert c.configuration.customer_cable_count == 2


@pytest.mark.parametrize("rows", [None, MIXED_ROWS], ids=["sample", "mixed"])
def test_plan_invariants(rows):
    groups = sample_meter_groups() if rows is None else build_meter_groups(rows)
    results = perform_balanced_distribution(groups)
    ceiling = DEFAULT_CONFIG.breaker_safe_capacity

    # conservation
    placed = _placed(results)
    assert sum(m.cdl for m in placed) == pytest.approx(sum(g.total_cdl for g in groups))
    assert sum(t.assigned_load for t in results.transformers) == pytest.approx(results.total_load)

    # no meter lost or duplicated
    expected = {f"{g.id}_{i}" for g in groups for i in range(g.count)}
    keys = [m.key for m in placed]
    assert len(keys) == len(set(keys))
    assert {m.base_id for m in placed} == expected
    assert all(sum(1 for m in placed if m.base_id == m2.base_id) == 2 for m2 in placed if m2.is_split_half)

    # capacity respect and dedication exclusivity
    for t in results.transformers:
        if t.is_dedicated:
            assert len(t.active_breakers) == 1
            continue
        assert t.assigned_load <= t.type.safe_load + 1e-6
        for b in t.breakers:
            assert b.load <= ceiling + 1e-6
            if b.dedicated:
                assert len(b.meters) == 1 and b.meters[0].is_split_half

    assert [t.id for t in results.transformers] == list(range(1, len(results.transformers) + 1))
    assert 0.0 <= results.balance_score <= 100.0
    assert results.summary.overloaded_breakers == 0

    conns = calculate_final_connections(results.transformers)
    wired = [m.key for c in conns for m in c.meters]
    assert sorted(wired) == sorted(expected)
    assert sum(c.total_cdl for c in conns) == pytest.approx(results.total_load)
    for c in conns:
        if c.tier == MeterTier.LIGHT:
            assert c.total_cdl <= DEFAULT_CONFIG.light_bin_ceiling_a + 1e-6


def test_consolidation_never_adds_breakers():
    groups = build_meter_groups(MIXED_ROWS)
    plain = perform_balanced_distribution(groups)
    merged = perform_balanced_distribution(groups, replace(DEFAULT_CONFIG, consolidate=True))
    assert merged.summary.total_breakers <= plain.summary.total_breakers
    assert merged.total_load == pytest.approx(plain.total_load)
    assert len(_placed(merged)) == len(_placed(plain))


def test_runs_are_deterministic():
    groups = build_meter_groups(MIXED_ROWS)
    a = perform_balanced_distribution(groups)
    b = perform_balanced_distribution(groups)
    assert a.summary == b.summary
    assert [[m.key for m in br.meters] for t in a.transformers for br in t.breakers] == \
        [[m.key for m in br.meters] for t in b.transformers for br in t.breakers]
