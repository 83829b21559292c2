import json

import pytest

from autopallet import (
    BoxSpec,
    Dimensions,
    GroupPriority,
    PackingSettings,
    RoleRuleTable,
    expand_manifest,
    load_manifest,
    load_role_rules,
    load_settings,
)
from autopallet.config import settings_from_mapping


def _box(product="wr-s4", role=0) -> BoxSpec:
    return BoxSpec(product_id=product, role_index=role, dimensions=Dimensions(500, 400, 300), weight=20.0)


def test_default_settings():
    settings = PackingSettings()
    assert settings.max_height == 2300
    assert settings.max_overhang == 200
    assert settings.fragile_threshold == 7
    assert settings.max_pallet_iterations == 100
    assert settings.max_attempts_per_pallet == 1000


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_height": 0},
        {"max_overhang": -1},
        {"fragile_threshold": 12},
        {"max_pallet_iterations": 0},
        {"max_attempts_per_pallet": -5},
    ],
)
def test_invalid_settings_are_rejected(overrides):
    with pytest.raises(ValueError):
        PackingSettings(**overrides)


def test_settings_from_mapping_coerces_types():
    settings = settings_from_mapping({"max_height": "1800", "max_pallet_iterations": "5"})
    assert settings.max_height == 1800.0
    assert settings.max_pallet_iterations == 5
    assert settings.max_overhang == 200


def test_unknown_setting_is_rejected():
    with pytest.raises(ValueError, match="max_width"):
        settings_from_mapping({"max_width": 100})


def test_load_settings_from_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"max_overhang": 50}), encoding="utf-8")
    assert load_settings(path).max_overhang == 50.0


def test_role_specific_rule_wins_over_product_rule():
    table = RoleRuleTable.from_mapping(
        {
            "wr-s4": {"noStackAbove": True},
            "wr-s4:1": {"fragile_weight_limit": 15, "groupPriority": "base"},
        }
    )
    assert len(table) == 2
    first = table.apply(_box(role=0))
    second = table.apply(_box(role=1))
    assert first.no_stack_above
    assert first.fragile_weight_limit is None
    assert not second.no_stack_above
    assert second.fragile_weight_limit == 15.0
    assert second.group_priority == GroupPriority.BASE


def test_missing_rule_keeps_box():
    box = _box(product="other")
    assert RoleRuleTable().apply(box) is box


def test_invalid_rule_is_rejected():
    with pytest.raises(ValueError):
        RoleRuleTable.from_mapping({"wr-s4": {"fragile_weight_limit": "heavy"}})
    with pytest.raises(ValueError):
        RoleRuleTable.from_mapping({"wr-s4": 3})


def test_load_role_rules_from_file(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps({"bench": {"can_stand_on_edge": True}}), encoding="utf-8")
    table = load_role_rules(path)
    assert table.apply(_box(product="bench")).can_stand_on_edge


@pytest.mark.parametrize("value", ["false", 0, "yes"])
def test_rule_flags_must_be_booleans(value):
    with pytest.raises(ValueError, match="no_stack_above"):
        RoleRuleTable.from_mapping({"wr-s4": {"no_stack_above": value}})


def test_sample_role_rules_change_sample_boxes():
    items = load_manifest("data/sample_manifest.json")
    plain = {unit.label: unit.spec for unit in expand_manifest(items)}
    ruled = {unit.label: unit.spec for unit in expand_manifest(items, load_role_rules("data/role_rules.json"))}
    tray = ruled["wr-a1-q0-box1"]
    assert tray.is_fragile(PackingSettings().fragile_threshold)
    assert tray.fragile_weight_limit == 15.0
    assert ruled["pd-bike-q0-box0"].no_stack_above
    assert ruled["js-350-q0-box0"].group_priority == GroupPriority.BASE
    assert ruled["wr-s4-q0-box1"].group_priority == GroupPriority.MUST_STACK_ABOVE_BASE
    assert all(ruled[label] != plain[label] for label in ("wr-a1-q0-box1", "pd-bike-q0-box0", "js-350-q0-box0"))
