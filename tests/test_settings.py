# -*- coding: utf-8 -*-
import json

from core.config import DEFAULT_CONFIG, config_from_overrides
from infra.settings import load_balancing_config, load_settings, settings_file


def test_missing_settings_file_is_created(data_dir):
    assert load_settings() == {"balancing": {}}
    assert settings_file().exists()
    assert settings_file().parent == data_dir


def test_balancing_overrides_applied(data_dir):
    settings_file().write_text(json.dumps({"balancing": {"consolidate": True, "diversity_bonus": 30}}), encoding="utf-8")
    cfg = load_balancing_config()
    assert cfg.consolidate is True
    assert cfg.diversity_bonus == 30.0
    assert cfg.rebalance_rounds == DEFAULT_CONFIG.rebalance_rounds


def test_corrupt_settings_reset(data_dir):
    settings_file().write_text("{not json", encoding="utf-8")
    assert load_balancing_config() == DEFAULT_CONFIG
    assert json.loads(settings_file().read_text(encoding="utf-8")) == {"balancing": {}}


def test_bad_overrides_are_ignored():
    cfg, ignored = config_from_overrides({
        "bogus": 1,
        "rebalance_rounds": "many",
        "consolidate": "yes",
        "transformer_types": [],
        "rebalance_threshold_a": "15",
    })
    assert set(ignored) == {"bogus", "rebalance_rounds", "consolidate", "transformer_types"}
    assert cfg.rebalance_threshold_a == 15.0
    assert cfg.consolidate is False
