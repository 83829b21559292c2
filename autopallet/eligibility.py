"""Stacking rules between a candidate group and the layer beneath it."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .models import Layer, PlacementUnit


@dataclass
class StackBlock:
    description: str
    blocking_uid: int


class StackEligibilityChecker:
    """Boolean gate deciding whether a group may rest on a layer.

    A group is never split: if the representative unit is blocked, the
    whole group is deferred.
    """

    def __init__(self, fragile_threshold: float = 7.0) -> None:
        self.fragile_threshold = fragile_threshold

    def validate(self, candidate: PlacementUnit, below: Layer | None) -> Sequence[StackBlock]:
        if below is None or below.is_empty():
            return []
        blocks: List[StackBlock] = []
        blocks.extend(self._check_no_stack(below.units))
        blocks.extend(self._check_fragile(candidate, below.units))
        return blocks

    def is_eligible(self, candidate: PlacementUnit, below: Layer | None) -> bool:
        return not self.validate(candidate, below)

    def _check_no_stack(self, units: Iterable[PlacementUnit]) -> Iterable[StackBlock]:
        for unit in units:
            if unit.spec.no_stack_above:
                yield StackBlock(f"{unit.label} does not accept load on top", unit.uid)

    def _check_fragile(self, candidate: PlacementUnit, units: Iterable[PlacementUnit]) -> Iterable[StackBlock]:
        for unit in units:
            limit = unit.spec.fragile_weight_limit
            if limit is None or not unit.spec.is_fragile(self.fragile_threshold):
                continue
            if candidate.weight > limit:
                yield StackBlock(
                    f"{candidate.label} ({candidate.weight:.1f}kg) exceeds the "
                    f"{limit:.1f}kg limit of fragile {unit.label}",
                    unit.uid,
                )
