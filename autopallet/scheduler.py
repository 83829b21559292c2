"""Multi-pallet scheduling over the remaining queue."""
from __future__ import annotations

import logging
from typing import Sequence

from .catalog import DEFAULT_PALLET, get_pallet_type
from .config import PackingSettings
from .models import (
    PalletType,
    PlacementUnit,
    SafetyLimitReached,
    ShipmentPlan,
    Unplaceable,
    UnplaceableUnit,
)
from .orientation import select_orientation
from .packer import PalletPacker, order_queue

logger = logging.getLogger(__name__)


class MultiPalletScheduler:
    """Fill pallets one after another until the queue is empty.

    When a fresh pallet cannot take anything, the lead unit is reported as
    unplaceable and dropped so the loop always makes progress. Only pallets
    that receive units count against the pallet iteration limit.
    """

    def __init__(self, settings: PackingSettings | None = None, packer: PalletPacker | None = None) -> None:
        self.settings = settings or PackingSettings()
        self.packer = packer or PalletPacker(self.settings)

    def schedule(self, units: Sequence[PlacementUnit], pallet: PalletType) -> ShipmentPlan:
        plan = ShipmentPlan()
        queue = order_queue(units)
        iterations = 0
        while queue:
            if iterations >= self.settings.max_pallet_iterations:
                plan.safety_limit = SafetyLimitReached(
                    counter="pallet_iterations",
                    limit=self.settings.max_pallet_iterations,
                )
                break

            result = self.packer.pack(queue, pallet)
            if result.placed == 0:
                lead = result.remainder[0]
                reason = self._diagnose(lead, pallet)
                logger.info("dropping unplaceable unit %s: %s", lead.label, reason)
                plan.unplaceable.append(UnplaceableUnit(unit=lead, reason=reason))
                queue = result.remainder[1:]
            else:
                logger.debug(
                    "pallet %d: %d units in %d layers",
                    len(plan.loads) + 1,
                    result.placed,
                    result.load.levels(),
                )
                plan.loads.append(result.load)
                iterations += 1
                queue = result.remainder

            if result.attempts_exhausted and queue:
                plan.safety_limit = SafetyLimitReached(
                    counter="placement_attempts",
                    limit=self.settings.max_attempts_per_pallet,
                )
                break

        if plan.safety_limit is not None:
            plan.remaining = list(queue)
            logger.warning(
                "stopped with %d units left: %s",
                len(plan.remaining),
                plan.safety_limit.describe(),
            )
        return plan

    def _diagnose(self, unit: PlacementUnit, pallet: PalletType) -> str:
        try:
            orientation = select_orientation(unit.spec, pallet.width, pallet.depth, self.settings.max_overhang)
        except Unplaceable as exc:
            return str(exc)
        if pallet.deck_height + orientation.height > self.settings.max_height:
            return (
                f"{orientation.height:.0f}mm tall box exceeds the "
                f"{self.settings.max_height - pallet.deck_height:.0f}mm usable stack height"
            )
        return "no pallet could take this unit"


def plan_shipment(
    units: Sequence[PlacementUnit],
    pallet: PalletType | str = DEFAULT_PALLET,
    settings: PackingSettings | None = None,
) -> ShipmentPlan:
    """Pack ``units`` onto as many pallets of one type as needed."""

    pallet_type = get_pallet_type(pallet) if isinstance(pallet, str) else pallet
    return MultiPalletScheduler(settings).schedule(units, pallet_type)
