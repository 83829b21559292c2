"""Metrics utilities for pallet loads."""
from __future__ import annotations

import math
from typing import Dict, Iterable, Tuple

from .models import Layer, LoadMetrics, PalletLoad, PlacementUnit, Vector3


def compute_load_metrics(load: PalletLoad, *, fragile_threshold: float = 7.0) -> LoadMetrics:
    """Compute footprint, weight, height, fill and balance figures for a load."""

    pallet = load.pallet
    units = load.units()
    total_height = load.top()
    total_weight, center, min_x, max_x, min_z, max_z = _accumulate(units)

    load_width = max(pallet.width, max_x - min_x)
    load_depth = max(pallet.depth, max_z - min_z)
    goods_height = total_height - pallet.deck_height
    volume = sum(unit.spec.volume for unit in units)
    if goods_height > 0 and volume > 0:
        efficiency = volume / (load_width * load_depth * goods_height)
    else:
        efficiency = 0.0

    return LoadMetrics(
        total_height=total_height,
        total_weight=total_weight + pallet.tare_weight,
        load_width=load_width,
        load_depth=load_depth,
        efficiency=efficiency,
        center_of_gravity=center,
        cog_offset=math.hypot(center.x, center.z),
        crush_risk=compute_crush_risk(load.layers, fragile_threshold=fragile_threshold),
    )


def compute_crush_risk(layers: Iterable[Layer], *, fragile_threshold: float = 7.0) -> Dict[int, float]:
    """Return, per unit id, the weight resting on it over its fragile limit.

    Only the layer directly above is considered, and only units whose
    footprint overlaps. Units without an active fragile limit score 0.0.
    """

    layers = list(layers)
    risk: Dict[int, float] = {}
    for index, layer in enumerate(layers):
        above = layers[index + 1].units if index + 1 < len(layers) else []
        for unit in layer.units:
            limit = unit.spec.fragile_weight_limit
            if limit is None or limit <= 0 or not unit.spec.is_fragile(fragile_threshold):
                risk[unit.uid] = 0.0
                continue
            resting = sum(other.weight for other in above if _overlaps(unit, other))
            risk[unit.uid] = resting / limit
    return risk


def _overlaps(first: PlacementUnit, second: PlacementUnit) -> bool:
    a_min_x, a_max_x, a_min_z, a_max_z = first.footprint()
    b_min_x, b_max_x, b_min_z, b_max_z = second.footprint()
    overlap_x = min(a_max_x, b_max_x) - max(a_min_x, b_min_x)
    overlap_z = min(a_max_z, b_max_z) - max(a_min_z, b_min_z)
    return overlap_x > 0 and overlap_z > 0


def _accumulate(units: Iterable[PlacementUnit]) -> Tuple[float, Vector3, float, float, float, float]:
    units = list(units)
    if not units:
        return 0.0, Vector3(0.0, 0.0, 0.0), 0.0, 0.0, 0.0, 0.0

    min_x = float("inf")
    max_x = float("-inf")
    min_z = float("inf")
    max_z = float("-inf")
    weighted_x = 0.0
    weighted_y = 0.0
    weighted_z = 0.0
    total_weight = 0.0

    for unit in units:
        left, right, front, back = unit.footprint()
        min_x = min(min_x, left)
        max_x = max(max_x, right)
        min_z = min(min_z, front)
        max_z = max(max_z, back)
        weighted_x += unit.position.x * unit.weight
        weighted_y += unit.position.y * unit.weight
        weighted_z += unit.position.z * unit.weight
        total_weight += unit.weight

    if total_weight <= 0:
        # Fall back to the arithmetic mean if weights are missing
        count = len(units)
        center = Vector3(
            sum(unit.position.x for unit in units) / count,
            sum(unit.position.y for unit in units) / count,
            sum(unit.position.z for unit in units) / count,
        )
    else:
        center = Vector3(
            weighted_x / total_weight,
            weighted_y / total_weight,
            weighted_z / total_weight,
        )
    return total_weight, center, min_x, max_x, min_z, max_z
