# -*- coding: utf-8 -*-
from dataclasses import replace

from core.types import Severity, has_errors
from core.validators.meter_groups import validate_meter_groups
from domain.meter_catalog import build_meter_group, sample_meter_groups


def _codes(issues):
    return [it.code for it in issues]


def test_sample_groups_are_clean():
    assert validate_meter_groups(sample_meter_groups()) == []


def test_unknown_type_is_an_error():
    g = replace(build_meter_group("C1", 2, 50, "G1"), type="C99")
    issues = validate_meter_groups([g])
    assert _codes(issues) == ["METER_TYPE_UNKNOWN"]
    assert has_errors(issues)


def test_non_positive_count_short_circuits():
    g = replace(build_meter_group("C1", 2, 50, "G1"), count=0)
    assert _codes(validate_meter_groups([g])) == ["METER_COUNT_INVALID"]


def test_non_positive_capacity():
    g = replace(build_meter_group("C1", 2, 50, "G1"), capacity=0)
    assert "METER_CAPACITY_INVALID" in _codes(validate_meter_groups([g]))


def test_nonstandard_capacity_is_only_a_warning():
    issues = validate_meter_groups([build_meter_group("C1", 2, 45, "G1")])
    assert _codes(issues) == ["METER_CAPACITY_NONSTANDARD"]
    assert issues[0].severity == Severity.WARNING
    assert not has_errors(issues)


def test_broken_cdl_invariant():
    g = build_meter_group("C1", 2, 50, "G1")
    g = replace(g, total_cdl=g.total_cdl + 5)
    assert _codes(validate_meter_groups([g])) == ["GROUP_CDL_MISMATCH"]


def test_duplicate_group_ids():
    groups = [build_meter_group("C1", 2, 50, "G1"), build_meter_group("C2", 1, 70, "G1")]
    issues = validate_meter_groups(groups)
    assert _codes(issues) == ["GROUP_ID_DUPLICATE"]
    assert issues[0].context == "group G1"
