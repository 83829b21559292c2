"""Collision detection and validation of pallet loads."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .config import PackingSettings
from .models import Layer, PalletLoad, PlacementUnit


@dataclass
class Collision:
    description: str


class CollisionChecker:
    def __init__(self, clearance: float = 1e-3):
        self.clearance = clearance

    def validate(self, load: PalletLoad, settings: PackingSettings | None = None) -> Sequence[Collision]:
        settings = settings or PackingSettings()
        collisions: List[Collision] = []
        for layer in load.layers:
            collisions.extend(self._check_pallet_bounds(layer, load, settings.max_overhang))
            collisions.extend(self._check_layer_height(layer))
            collisions.extend(self._check_overlap(layer))
        collisions.extend(self._check_stack_height(load, settings.max_height))
        return collisions

    def _check_pallet_bounds(self, layer: Layer, load: PalletLoad, overhang: float) -> Iterable[Collision]:
        limit_x = load.pallet.width / 2 + overhang
        limit_z = load.pallet.depth / 2 + overhang
        for unit in layer.units:
            x_min, x_max, z_min, z_max = unit.footprint()
            if x_min < -limit_x - self.clearance or x_max > limit_x + self.clearance:
                yield Collision(f"Box {unit.label} exceeds pallet width limits")
            if z_min < -limit_z - self.clearance or z_max > limit_z + self.clearance:
                yield Collision(f"Box {unit.label} exceeds pallet depth limits")

    def _check_layer_height(self, layer: Layer) -> Iterable[Collision]:
        for unit in layer.units:
            if abs(unit.orientation.height - layer.height) > self.clearance:
                yield Collision(f"Box {unit.label} height differs from layer {layer.index + 1}")

    def _check_overlap(self, layer: Layer) -> Iterable[Collision]:
        items = layer.units
        for i, first in enumerate(items):
            for second in items[i + 1 :]:
                if self._overlap(first, second):
                    yield Collision(f"Collision between {first.label} and {second.label}")

    def _check_stack_height(self, load: PalletLoad, max_height: float) -> Iterable[Collision]:
        if load.top() > max_height + self.clearance:
            yield Collision(f"Load height {load.top():.0f}mm exceeds {max_height:.0f}mm")

    def _overlap(self, a: PlacementUnit, b: PlacementUnit) -> bool:
        a_min_x, a_max_x, a_min_z, a_max_z = a.footprint()
        b_min_x, b_max_x, b_min_z, b_max_z = b.footprint()
        return (
            min(a_max_x, b_max_x) - max(a_min_x, b_min_x) > self.clearance
            and min(a_max_z, b_max_z) - max(a_min_z, b_min_z) > self.clearance
        )
