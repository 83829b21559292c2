"""Domain models for AutoPallet."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterable, List, Tuple


@dataclass(frozen=True)
class Dimensions:
    width: float
    depth: float
    height: float


@dataclass(frozen=True)
class Vector3:
    """Point in pallet space: x along the width, y vertical, z along the depth."""

    x: float
    y: float
    z: float = 0.0


class GroupPriority(str, Enum):
    BASE = "base"
    NORMAL = "normal"
    MUST_STACK_ABOVE_BASE = "must_stack_above_base"

    @classmethod
    def parse(cls, value: str | GroupPriority | None) -> GroupPriority:
        if isinstance(value, GroupPriority):
            return value
        token = (value or "normal").strip()
        if token == "mustStackAboveBase":
            token = "must_stack_above_base"
        try:
            return cls(token.lower())
        except ValueError as exc:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(f"Invalid group priority '{value}'. Valid values: {valid}") from exc


GroupKey = Tuple[str, int]


@dataclass(frozen=True)
class BoxSpec:
    """A shippable box of a product, one per sub-component role."""

    product_id: str
    role_index: int
    dimensions: Dimensions
    weight: float
    fragile_rating: float = 0.0
    rigidity_rating: float = 10.0
    can_stand_on_edge: bool = False
    no_stack_above: bool = False
    group_priority: GroupPriority = GroupPriority.NORMAL
    fragile_weight_limit: float | None = None
    force_rotation: bool = False
    name: str = ""

    @property
    def group_key(self) -> GroupKey:
        return (self.product_id, self.role_index)

    @property
    def volume(self) -> float:
        dims = self.dimensions
        return dims.width * dims.depth * dims.height

    def is_fragile(self, threshold: float) -> bool:
        return self.fragile_rating > threshold


@dataclass(frozen=True)
class Orientation:
    """Oriented size of a box; ``index`` follows the enumeration order."""

    width: float
    depth: float
    height: float
    index: int
    label: str

    @property
    def footprint_area(self) -> float:
        return self.width * self.depth

    @property
    def rotated(self) -> bool:
        return self.index != 0


@dataclass(frozen=True)
class PlacementUnit:
    """One physical box instance after quantity expansion.

    ``uid`` is the arena index assigned during expansion. Orientation and
    position (box center) are only set on the copies returned by ``placed``.
    """

    uid: int
    label: str
    spec: BoxSpec
    orientation: Orientation | None = None
    position: Vector3 | None = None

    @property
    def group_key(self) -> GroupKey:
        return self.spec.group_key

    @property
    def weight(self) -> float:
        return self.spec.weight

    def placed(self, orientation: Orientation, position: Vector3) -> "PlacementUnit":
        return replace(self, orientation=orientation, position=position)

    def footprint(self) -> Tuple[float, float, float, float]:
        """Return ``(min_x, max_x, min_z, max_z)`` of a placed unit."""
        if self.orientation is None or self.position is None:
            raise ValueError(f"Unit {self.label} has not been placed")
        half_w = self.orientation.width / 2
        half_d = self.orientation.depth / 2
        return (
            self.position.x - half_w,
            self.position.x + half_w,
            self.position.z - half_d,
            self.position.z + half_d,
        )


@dataclass(frozen=True)
class PalletType:
    key: str
    name: str
    width: float
    depth: float
    deck_height: float
    tare_weight: float


@dataclass
class Layer:
    """Units sharing one height level; ``y`` is the bottom elevation from the ground."""

    index: int
    y: float
    height: float
    units: List[PlacementUnit] = field(default_factory=list)

    @property
    def top(self) -> float:
        return self.y + self.height

    @property
    def weight(self) -> float:
        return sum(unit.weight for unit in self.units)

    def is_empty(self) -> bool:
        return not self.units


@dataclass(frozen=True)
class LoadMetrics:
    total_height: float
    total_weight: float
    load_width: float
    load_depth: float
    efficiency: float
    center_of_gravity: Vector3
    cog_offset: float
    crush_risk: Dict[int, float] = field(default_factory=dict)

    @property
    def max_crush_risk(self) -> float:
        return max(self.crush_risk.values(), default=0.0)


@dataclass
class PalletLoad:
    pallet: PalletType
    layers: List[Layer]
    metrics: LoadMetrics | None = None

    def units(self) -> List[PlacementUnit]:
        return [unit for layer in self.layers for unit in layer.units]

    def unit_count(self) -> int:
        return sum(len(layer.units) for layer in self.layers)

    def levels(self) -> int:
        return len(self.layers)

    def top(self) -> float:
        if not self.layers:
            return self.pallet.deck_height
        return self.layers[-1].top


class Unplaceable(ValueError):
    """Raised when a box has no orientation that fits the pallet bounds."""


@dataclass(frozen=True)
class UnplaceableUnit:
    unit: PlacementUnit
    reason: str


@dataclass(frozen=True)
class SafetyLimitReached:
    """Signal describing which termination counter stopped the computation."""

    counter: str
    limit: int

    def describe(self) -> str:
        return f"{self.counter} limit of {self.limit} reached"


@dataclass
class ShipmentPlan:
    loads: List[PalletLoad] = field(default_factory=list)
    unplaceable: List[UnplaceableUnit] = field(default_factory=list)
    remaining: List[PlacementUnit] = field(default_factory=list)
    safety_limit: SafetyLimitReached | None = None

    @property
    def truncated(self) -> bool:
        return self.safety_limit is not None

    def placed_count(self) -> int:
        return sum(load.unit_count() for load in self.loads)

    def placed_units(self) -> Iterable[PlacementUnit]:
        for load in self.loads:
            yield from load.units()
