# -*- coding: utf-8 -*-
import pytest

from core.models.distribution import Whole
from domain.expansion import expand_meter_groups
from domain.meter_catalog import build_meter_group


def test_expand_one_meter_per_count():
    g = build_meter_group("C1", 3, 50, "G1")
    meters = expand_meter_groups([g])
    assert [m.key for m in meters] == ["G1_0", "G1_1", "G1_2"]
    assert all(isinstance(m.identity, Whole) for m in meters)
    assert all(m.cdl == g.cdl_per_meter for m in meters)
    assert all(m.group_id == "G1" and m.category == g.category for m in meters)


def test_expand_ids_unique_across_groups():
    groups = [build_meter_group("C1", 2, 50, "G1"), build_meter_group("C2", 2, 70, "G2")]
    keys = [m.key for m in expand_meter_groups(groups)]
    assert len(keys) == len(set(keys)) == 4


def test_expand_empty():
    assert expand_meter_groups([]) == []


def test_split_and_rejoin(make_meter):
    m = make_meter("G1_0", 300, capacity=600)
    p1, p2 = m.split()
    assert (p1.key, p2.key) == ("G1_0_p1", "G1_0_p2")
    assert (p1.note, p2.note) == ("part 1", "part 2")
    assert p1.cdl == p2.cdl == 150
    whole = p1.rejoin(p2)
    assert whole.key == "G1_0" and whole.cdl == 300 and whole.note is None


def test_rejoin_rejects_unrelated_halves(make_meter):
    a, _ = make_meter("A", 300, capacity=600).split()
    _, b = make_meter("B", 300, capacity=600).split()
    with pytest.raises(ValueError):
        a.rejoin(b)
