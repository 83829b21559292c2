import json

import pytest

from autopallet import (
    GroupPriority,
    RoleRule,
    RoleRuleTable,
    expand_manifest,
    load_manifest,
    parse_manifest,
)


def _manifest() -> dict:
    return {
        "items": [
            {
                "product_id": "wr-s4",
                "name": "Water Rower S4",
                "quantity": 2,
                "boxes": [
                    {"width": 2160, "depth": 560, "height": 230, "weight": 38},
                    {"width": 760, "depth": 560, "height": 230, "weight": 12, "fragileRating": 8},
                ],
            },
            {
                "product_id": "bench",
                "quantity": 3,
                "boxes": [
                    {
                        "width": 1200,
                        "depth": 400,
                        "height": 200,
                        "weight": 25,
                        "allow_edge": True,
                        "group_priority": "mustStackAboveBase",
                    }
                ],
            },
        ]
    }


def test_parse_manifest_reads_boxes():
    items = parse_manifest(_manifest())
    assert [item.product_id for item in items] == ["wr-s4", "bench"]
    rower, bench = items
    assert rower.name == "Water Rower S4"
    assert len(rower.boxes) == 2
    assert rower.boxes[1].role_index == 1
    assert rower.boxes[1].fragile_rating == 8
    assert rower.boxes[0].rigidity_rating == 10
    assert bench.boxes[0].can_stand_on_edge
    assert bench.boxes[0].group_priority == GroupPriority.MUST_STACK_ABOVE_BASE
    assert bench.name == "bench"


def test_expand_manifest_is_role_major():
    units = expand_manifest(parse_manifest(_manifest()))
    assert [unit.uid for unit in units] == list(range(7))
    assert [unit.label for unit in units] == [
        "wr-s4-q0-box0",
        "wr-s4-q1-box0",
        "bench-q0-box0",
        "bench-q1-box0",
        "bench-q2-box0",
        "wr-s4-q0-box1",
        "wr-s4-q1-box1",
    ]


def test_expand_manifest_applies_role_rules():
    rules = RoleRuleTable(
        {
            "wr-s4:1": RoleRule(fragile_weight_limit=20.0),
            "wr-s4": RoleRule(no_stack_above=True),
        }
    )
    units = expand_manifest(parse_manifest(_manifest()), rules)
    by_label = {unit.label: unit for unit in units}
    assert by_label["wr-s4-q0-box1"].spec.fragile_weight_limit == 20.0
    assert not by_label["wr-s4-q0-box1"].spec.no_stack_above
    assert by_label["wr-s4-q0-box0"].spec.no_stack_above
    assert by_label["bench-q0-box0"].spec.fragile_weight_limit is None


def test_load_manifest_from_file(tmp_path):
    path = tmp_path / "manifest.json"
    path.write_text(json.dumps(_manifest()), encoding="utf-8")
    items = load_manifest(path)
    assert sum(item.quantity for item in items) == 5


def test_manifest_requires_items():
    with pytest.raises(ValueError):
        parse_manifest({"items": []})
    with pytest.raises(ValueError):
        parse_manifest({})


@pytest.mark.parametrize(
    "box",
    [
        {"width": 0, "depth": 100, "height": 100, "weight": 5},
        {"width": 100, "depth": 100, "height": 100, "weight": -1},
        {"width": 100, "depth": 100, "height": 100},
        {"width": 100, "depth": 100, "height": 100, "weight": 5, "fragile_rating": 11},
        {"width": 100, "depth": 100, "height": 100, "weight": 5, "group_priority": "top"},
    ],
)
def test_invalid_box_is_rejected(box):
    with pytest.raises(ValueError):
        parse_manifest({"items": [{"product_id": "x", "boxes": [box]}]})


def test_invalid_quantity_is_rejected():
    raw = {"items": [{"product_id": "x", "quantity": 0, "boxes": [{"width": 1, "depth": 1, "height": 1, "weight": 1}]}]}
    with pytest.raises(ValueError):
        parse_manifest(raw)


def test_string_flag_is_rejected():
    box = {"width": 100, "depth": 100, "height": 100, "weight": 5, "allow_edge": "false"}
    with pytest.raises(ValueError):
        parse_manifest({"items": [{"product_id": "x", "boxes": [box]}]})
