"""Single pallet packer: queue ordering and layer-by-layer stacking."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .config import PackingSettings
from .eligibility import StackEligibilityChecker
from .metrics import compute_load_metrics
from .models import GroupKey, GroupPriority, Layer, PalletLoad, PalletType, PlacementUnit
from .rows import RowLayoutPacker

logger = logging.getLogger(__name__)


def group_runs(units: Sequence[PlacementUnit]) -> List[List[PlacementUnit]]:
    """Split a queue into contiguous runs sharing product and role."""

    runs: List[List[PlacementUnit]] = []
    for unit in units:
        if runs and runs[-1][0].group_key == unit.group_key:
            runs[-1].append(unit)
        else:
            runs.append([unit])
    return runs


def order_queue(units: Sequence[PlacementUnit]) -> List[PlacementUnit]:
    """Order the queue group by group.

    Units are gathered per (product, role) in first-appearance order. Base
    groups come first, then the other groups by descending weight times
    rigidity, then the groups that must sit above the base. Sorting is
    stable, so ordering an ordered queue is a no-op.
    """

    groups: Dict[GroupKey, List[PlacementUnit]] = {}
    for unit in units:
        groups.setdefault(unit.group_key, []).append(unit)

    base: List[List[PlacementUnit]] = []
    middle: List[List[PlacementUnit]] = []
    top: List[List[PlacementUnit]] = []
    for members in groups.values():
        priority = members[0].spec.group_priority
        if priority == GroupPriority.BASE:
            base.append(members)
        elif priority == GroupPriority.MUST_STACK_ABOVE_BASE:
            top.append(members)
        else:
            middle.append(members)
    middle.sort(key=lambda members: -(members[0].weight * members[0].spec.rigidity_rating))

    ordered: List[PlacementUnit] = []
    for members in base + middle + top:
        ordered.extend(members)
    return ordered


@dataclass
class PalletPackResult:
    load: PalletLoad
    remainder: List[PlacementUnit] = field(default_factory=list)
    attempts_exhausted: bool = False

    @property
    def placed(self) -> int:
        return self.load.unit_count()


class PalletPacker:
    """Build one pallet load by stacking one layer per product-role run."""

    def __init__(
        self,
        settings: PackingSettings | None = None,
        row_packer: RowLayoutPacker | None = None,
        checker: StackEligibilityChecker | None = None,
    ) -> None:
        self.settings = settings or PackingSettings()
        self.row_packer = row_packer or RowLayoutPacker(overhang=self.settings.max_overhang)
        self.checker = checker or StackEligibilityChecker(self.settings.fragile_threshold)

    def pack(self, queue: Sequence[PlacementUnit], pallet: PalletType) -> PalletPackResult:
        ordered = order_queue(queue)
        layers: List[Layer] = []
        cursor = pallet.deck_height
        consumed: set[int] = set()
        attempts = 0
        exhausted = False

        for run in group_runs(ordered):
            if attempts >= self.settings.max_attempts_per_pallet:
                exhausted = True
                logger.warning(
                    "placement attempt budget of %d exhausted on %s pallet",
                    self.settings.max_attempts_per_pallet,
                    pallet.key,
                )
                break
            attempts += 1
            lead = run[0]
            below = layers[-1] if layers else None
            blocks = self.checker.validate(lead, below)
            if blocks:
                logger.debug("deferring %s: %s", lead.label, "; ".join(block.description for block in blocks))
                continue

            layout = self.row_packer.pack(run, pallet.width, pallet.depth, base_y=cursor)
            if not layout.placed:
                logger.debug("skipping %s: %s", lead.label, layout.failure or "no unit fits")
                continue
            if cursor + layout.height > self.settings.max_height:
                logger.debug(
                    "skipping %s: layer of %.0fmm would exceed %.0fmm",
                    lead.label,
                    layout.height,
                    self.settings.max_height,
                )
                continue

            layer = Layer(index=len(layers), y=cursor, height=layout.height, units=layout.placed)
            layers.append(layer)
            cursor = layer.top
            consumed.update(unit.uid for unit in layout.placed)

        load = PalletLoad(pallet=pallet, layers=layers)
        load.metrics = compute_load_metrics(load, fragile_threshold=self.settings.fragile_threshold)
        remainder = [unit for unit in ordered if unit.uid not in consumed]
        return PalletPackResult(load=load, remainder=remainder, attempts_exhausted=exhausted)
