from autopallet import (
    BoxSpec,
    CollisionChecker,
    Dimensions,
    Layer,
    Orientation,
    PackingSettings,
    PalletLoad,
    PlacementUnit,
    Vector3,
    get_pallet_type,
)


def _placed(uid, x, z, *, width=400.0, depth=400.0, height=200.0, y=250.0) -> PlacementUnit:
    spec = BoxSpec(
        product_id="P",
        role_index=0,
        dimensions=Dimensions(width, depth, height),
        weight=10.0,
    )
    unit = PlacementUnit(uid=uid, label=f"P-q{uid}-box0", spec=spec)
    return unit.placed(Orientation(width, depth, height, 0, "flat-0"), Vector3(x, y, z))


def _load(units, height=200.0) -> PalletLoad:
    layer = Layer(index=0, y=150.0, height=height, units=units)
    return PalletLoad(pallet=get_pallet_type("AU_CHEP"), layers=[layer])


def test_clean_layer_has_no_collisions():
    load = _load([_placed(0, -200.0, 0.0), _placed(1, 200.0, 0.0)])
    assert not CollisionChecker().validate(load)


def test_overlapping_units_collide():
    collisions = CollisionChecker().validate(_load([_placed(0, 0.0, 0.0), _placed(1, 100.0, 0.0)]))
    assert len(collisions) == 1
    assert "P-q0-box0" in collisions[0].description


def test_overhang_beyond_tolerance_is_reported():
    load = _load([_placed(0, 500.0, 0.0)])
    assert not CollisionChecker().validate(load)
    collisions = CollisionChecker().validate(load, PackingSettings(max_overhang=0))
    assert [c.description for c in collisions] == ["Box P-q0-box0 exceeds pallet width limits"]


def test_layer_height_mismatch_is_reported():
    collisions = CollisionChecker().validate(_load([_placed(0, 0.0, 0.0)], height=300.0))
    assert any("height differs" in collision.description for collision in collisions)


def test_stack_height_limit_is_reported():
    load = _load([_placed(0, 0.0, 0.0)])
    collisions = CollisionChecker().validate(load, PackingSettings(max_height=300))
    assert any("exceeds 300mm" in collision.description for collision in collisions)
