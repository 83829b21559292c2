"""Greedy row (shelf) layout of one product-role group."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from .models import Orientation, PlacementUnit, Unplaceable, Vector3
from .orientation import select_orientation

logger = logging.getLogger(__name__)


@dataclass
class RowLayout:
    placed: List[PlacementUnit]
    not_placed: List[PlacementUnit]
    orientation: Orientation | None
    rows: int = 0
    used_overhang: bool = False
    failure: str | None = None

    @property
    def height(self) -> float:
        return self.orientation.height if self.orientation else 0.0


@dataclass
class _Row:
    units: List[PlacementUnit] = field(default_factory=list)
    width: float = 0.0
    depth: float = 0.0


class RowLayoutPacker:
    """Lay out a group in rows across the width, stacking rows along the depth.

    The group first tries the bare pallet footprint. If any unit is left
    over, the whole group is laid out again with the overhang tolerance
    added on both sides of both axes.
    """

    def __init__(self, overhang: float = 200.0, tolerance: float = 1e-6) -> None:
        self.overhang = overhang
        self.tolerance = tolerance

    def pack(
        self,
        units: Sequence[PlacementUnit],
        pallet_width: float,
        pallet_depth: float,
        *,
        base_y: float = 0.0,
    ) -> RowLayout:
        if not units:
            return RowLayout([], [], None)
        strict = self._attempt(units, pallet_width, pallet_depth, 0.0, base_y)
        if strict.orientation is not None and not strict.not_placed:
            return strict
        logger.debug(
            "group %s:%s does not fit the bare pallet, retrying with %.0fmm overhang",
            units[0].spec.product_id,
            units[0].spec.role_index,
            self.overhang,
        )
        relaxed = self._attempt(units, pallet_width, pallet_depth, self.overhang, base_y)
        relaxed.used_overhang = True
        return relaxed

    def _attempt(
        self,
        units: Sequence[PlacementUnit],
        pallet_width: float,
        pallet_depth: float,
        overhang: float,
        base_y: float,
    ) -> RowLayout:
        try:
            orientation = select_orientation(units[0].spec, pallet_width, pallet_depth, overhang)
        except Unplaceable as exc:
            return RowLayout([], list(units), None, failure=str(exc))

        bound_width = pallet_width + 2 * overhang
        bound_depth = pallet_depth + 2 * overhang
        rows, consumed = self._build_rows(units, orientation, bound_width, bound_depth)
        placed = self._position_rows(rows, orientation, base_y)
        return RowLayout(
            placed=placed,
            not_placed=list(units[consumed:]),
            orientation=orientation,
            rows=len(rows),
        )

    def _build_rows(
        self,
        units: Sequence[PlacementUnit],
        orientation: Orientation,
        bound_width: float,
        bound_depth: float,
    ) -> Tuple[List[_Row], int]:
        rows: List[_Row] = []
        current = _Row()
        closed_depth = 0.0
        consumed = 0
        for unit in units:
            width, depth = orientation.width, orientation.depth
            if current.units and current.width + width > bound_width + self.tolerance:
                rows.append(current)
                closed_depth += current.depth
                if closed_depth + depth > bound_depth + self.tolerance:
                    current = _Row()
                    break
                current = _Row()
            current.units.append(unit)
            current.width += width
            current.depth = max(current.depth, depth)
            consumed += 1
        if current.units:
            rows.append(current)
        return rows, consumed

    def _position_rows(self, rows: List[_Row], orientation: Orientation, base_y: float) -> List[PlacementUnit]:
        placed: List[PlacementUnit] = []
        total_depth = sum(row.depth for row in rows)
        row_start_z = -total_depth / 2
        center_y = base_y + orientation.height / 2
        for row in rows:
            cursor_x = -row.width / 2
            center_z = row_start_z + row.depth / 2
            for unit in row.units:
                center_x = cursor_x + orientation.width / 2
                placed.append(unit.placed(orientation, Vector3(x=center_x, y=center_y, z=center_z)))
                cursor_x += orientation.width
            row_start_z += row.depth
        return placed
