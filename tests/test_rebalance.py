# -*- coding: utf-8 -*-
from dataclasses import replace

from core.catalog import find_type
from core.config import DEFAULT_CONFIG
from domain.placement import place_dedicated
from domain.rebalance import balance_transformer_internally, consolidate_breakers
from domain.workspace import AllocationWorkspace


def _transformer(ws, kva=500):
    return ws.new_transformer(find_type(kva))


def test_moves_smallest_meter_to_lightest_breaker(make_meter):
    ws = AllocationWorkspace(DEFAULT_CONFIG)
    tr = _transformer(ws)
    ws.place(tr.breakers[0], [make_meter(f"a{i}", 25) for i in range(4)])
    ws.place(tr.breakers[1], [make_meter("b", 40)])

    assert balance_transformer_internally(ws, tr) == 1
    assert [b.load for b in tr.breakers[:2]] == [75, 65]
    assert tr.assigned_load == 140


def test_stops_below_threshold(make_meter):
    ws = AllocationWorkspace(DEFAULT_CONFIG)
    tr = _transformer(ws)
    ws.place(tr.breakers[0], [make_meter("a", 50)])
    ws.place(tr.breakers[1], [make_meter("b", 35)])
    assert balance_transformer_internally(ws, tr) == 0


def test_round_limit_is_respected(make_meter):
    ws = AllocationWorkspace(replace(DEFAULT_CONFIG, rebalance_rounds=0))
    tr = _transformer(ws)
    ws.place(tr.breakers[0], [make_meter(f"a{i}", 25) for i in range(4)])
    ws.place(tr.breakers[1], [make_meter("b", 40)])
    assert balance_transformer_internally(ws, tr) == 0


def test_no_move_that_breaks_the_ceiling(make_meter):
    ws = AllocationWorkspace(DEFAULT_CONFIG)
    tr = _transformer(ws)
    ws.place(tr.breakers[0], [make_meter("a", 240)])
    ws.place(tr.breakers[1], [make_meter("b", 100)])
    assert balance_transformer_internally(ws, tr) == 0


def test_dedicated_transformer_is_skipped(make_meter):
    ws = AllocationWorkspace(DEFAULT_CONFIG)
    tr = place_dedicated(ws, make_meter("big", 800, capacity=1600))
    assert balance_transformer_internally(ws, tr) == 0


def test_consolidation_empties_single_meter_breaker(make_meter):
    ws = AllocationWorkspace(DEFAULT_CONFIG)
    tr = _transformer(ws)
    b1, b2 = tr.breakers[0], tr.breakers[1]
    ws.place(b1, [make_meter("a", 25)])
    ws.place(b2, [make_meter("b", 25), make_meter("c", 30)])

    assert consolidate_breakers(ws) == 1
    assert b1.is_empty
    assert sorted(m.key for m in b2.meters) == ["a", "b", "c"]
    assert tr.assigned_load == 80


def test_consolidation_never_targets_dedicated_breakers(make_meter):
    ws = AllocationWorkspace(DEFAULT_CONFIG)
    tr = _transformer(ws)
    ws.place(tr.breakers[0], [make_meter("a", 25)])
    ws.place(tr.breakers[1], [make_meter("x", 150, capacity=600)])
    tr.breakers[1].dedicate("split 600A meter")
    assert consolidate_breakers(ws) == 0
    assert [m.key for m in tr.breakers[0].meters] == ["a"]


def test_consolidation_respects_target_transformer_headroom(make_meter):
    ws = AllocationWorkspace(DEFAULT_CONFIG)
    t1, t2 = _transformer(ws), _transformer(ws)
    ws.place(t1.breakers[0], [make_meter("a", 100, capacity=200)])
    ws.place(t2.breakers[0], [make_meter("f1", 240), make_meter("f2", 5)])
    ws.place(t2.breakers[1], [make_meter("f3", 240), make_meter("f4", 5)])
    ws.place(t2.breakers[2], [make_meter("f5", 40), make_meter("f6", 40)])
    # t2 carries 570A of a 576.8A safe load: no room for the 100A meter
    assert consolidate_breakers(ws) == 0


def test_consolidation_move_cap(make_meter):
    ws = AllocationWorkspace(replace(DEFAULT_CONFIG, consolidation_max_moves=0))
    tr = _transformer(ws)
    ws.place(tr.breakers[0], [make_meter("a", 25)])
    ws.place(tr.breakers[1], [make_meter("b", 25), make_meter("c", 30)])
    assert consolidate_breakers(ws) == 0
