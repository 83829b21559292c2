"""Orientation selection for a single box."""
from __future__ import annotations

from typing import List

from .models import BoxSpec, Orientation, Unplaceable

FLAT_LABELS = ("flat-0", "flat-90")
EDGE_LABELS = ("edge-wh", "edge-hw", "edge-hd", "edge-dh")


def enumerate_orientations(spec: BoxSpec) -> List[Orientation]:
    """Return candidate orientations in tie-break order.

    Flat rotations always come first; the four edge variants are only
    produced when the box may stand on its edge.
    """

    w, d, h = spec.dimensions.width, spec.dimensions.depth, spec.dimensions.height
    sizes = [(w, d, h), (d, w, h)]
    labels = list(FLAT_LABELS)
    if spec.can_stand_on_edge:
        sizes.extend([(w, h, d), (h, w, d), (h, d, w), (d, h, w)])
        labels.extend(EDGE_LABELS)
    return [
        Orientation(width=size[0], depth=size[1], height=size[2], index=index, label=labels[index])
        for index, size in enumerate(sizes)
    ]


def fits(orientation: Orientation, bound_width: float, bound_depth: float) -> bool:
    return orientation.width <= bound_width and orientation.depth <= bound_depth


def select_orientation(
    spec: BoxSpec,
    pallet_width: float,
    pallet_depth: float,
    overhang: float = 0.0,
) -> Orientation:
    """Pick the valid orientation with the smallest footprint.

    ``overhang`` widens both axes on both sides. A box flagged with
    ``force_rotation`` skips the search and uses the flat 90 degree rotation.
    """

    bound_width = pallet_width + 2 * overhang
    bound_depth = pallet_depth + 2 * overhang
    candidates = enumerate_orientations(spec)
    if spec.force_rotation:
        forced = candidates[1]
        if not fits(forced, bound_width, bound_depth):
            raise Unplaceable(
                f"Forced rotation of {spec.product_id}:{spec.role_index} "
                f"({forced.width:.0f}x{forced.depth:.0f}) exceeds {bound_width:.0f}x{bound_depth:.0f}"
            )
        return forced

    best: Orientation | None = None
    for candidate in candidates:
        if not fits(candidate, bound_width, bound_depth):
            continue
        # strict comparison keeps the earliest candidate on ties
        if best is None or candidate.footprint_area < best.footprint_area:
            best = candidate
    if best is None:
        raise Unplaceable(
            f"No orientation of {spec.product_id}:{spec.role_index} fits within "
            f"{bound_width:.0f}x{bound_depth:.0f}"
        )
    return best
