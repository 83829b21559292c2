from autopallet import BoxSpec, Dimensions, GroupPriority, RowLayoutPacker, single_box_units


def _units(width, depth, height, quantity, **flags):
    spec = BoxSpec(
        product_id="P",
        role_index=0,
        dimensions=Dimensions(width=width, depth=depth, height=height),
        weight=50.0,
        **flags,
    )
    return single_box_units(spec, quantity)


def test_group_fits_strict_bounds_in_two_rows():
    units = _units(500, 400, 300, 4)
    layout = RowLayoutPacker(overhang=200).pack(units, 1165, 1165)
    assert not layout.used_overhang
    assert not layout.not_placed
    assert layout.rows == 2
    positions = [(unit.position.x, unit.position.z) for unit in layout.placed]
    assert positions == [(-250.0, -200.0), (250.0, -200.0), (-250.0, 200.0), (250.0, 200.0)]


def test_overhang_retry_keeps_pair_in_one_row():
    units = _units(600, 600, 500, 2, group_priority=GroupPriority.BASE)
    layout = RowLayoutPacker(overhang=200).pack(units, 1165, 1165)
    assert layout.used_overhang
    assert layout.rows == 1
    assert len(layout.placed) == 2
    assert [unit.position.x for unit in layout.placed] == [-300.0, 300.0]
    assert all(unit.position.z == 0.0 for unit in layout.placed)
    assert layout.height == 500


def test_overflowing_group_reports_not_placed_units():
    units = _units(600, 600, 500, 10)
    layout = RowLayoutPacker(overhang=200).pack(units, 1165, 1165)
    assert len(layout.placed) == 4
    assert [unit.uid for unit in layout.not_placed] == [4, 5, 6, 7, 8, 9]
    assert layout.rows == 2


def test_orientation_is_locked_for_the_group():
    units = _units(400, 300, 200, 3)
    layout = RowLayoutPacker().pack(units, 1165, 1165)
    assert {unit.orientation.label for unit in layout.placed} == {"flat-0"}


def test_unplaceable_group_places_nothing():
    units = _units(2000, 1800, 100, 2)
    layout = RowLayoutPacker(overhang=200).pack(units, 1165, 1165)
    assert layout.placed == []
    assert len(layout.not_placed) == 2
    assert layout.orientation is None
    assert "No orientation" in layout.failure


def test_base_y_sets_vertical_center():
    units = _units(400, 300, 200, 1)
    layout = RowLayoutPacker().pack(units, 1165, 1165, base_y=150.0)
    assert layout.placed[0].position.y == 250.0
    assert units[0].position is None
