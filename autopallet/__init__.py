"""AutoPallet multi-pallet load planning toolkit."""

from .catalog import PALLET_TYPES, get_pallet_type, list_pallet_types
from .collisions import Collision, CollisionChecker
from .config import PackingSettings, RoleRule, RoleRuleTable, load_role_rules, load_settings
from .eligibility import StackBlock, StackEligibilityChecker
from .exporter import PlanExporter
from .manifest import ManifestItem, expand_manifest, load_manifest, parse_manifest, single_box_units
from .metrics import compute_crush_risk, compute_load_metrics
from .models import (
    BoxSpec,
    Dimensions,
    GroupPriority,
    Layer,
    LoadMetrics,
    Orientation,
    PalletLoad,
    PalletType,
    PlacementUnit,
    SafetyLimitReached,
    ShipmentPlan,
    Unplaceable,
    UnplaceableUnit,
    Vector3,
)
from .orientation import enumerate_orientations, select_orientation
from .packer import PalletPacker, PalletPackResult, group_runs, order_queue
from .rows import RowLayout, RowLayoutPacker
from .scheduler import MultiPalletScheduler, plan_shipment

__all__ = [
    "BoxSpec",
    "Dimensions",
    "GroupPriority",
    "Layer",
    "LoadMetrics",
    "Orientation",
    "PalletLoad",
    "PalletType",
    "PlacementUnit",
    "SafetyLimitReached",
    "ShipmentPlan",
    "Unplaceable",
    "UnplaceableUnit",
    "Vector3",
    "PALLET_TYPES",
    "get_pallet_type",
    "list_pallet_types",
    "PackingSettings",
    "RoleRule",
    "RoleRuleTable",
    "load_role_rules",
    "load_settings",
    "ManifestItem",
    "parse_manifest",
    "load_manifest",
    "expand_manifest",
    "single_box_units",
    "enumerate_orientations",
    "select_orientation",
    "RowLayout",
    "RowLayoutPacker",
    "StackBlock",
    "StackEligibilityChecker",
    "PalletPacker",
    "PalletPackResult",
    "group_runs",
    "order_queue",
    "MultiPalletScheduler",
    "plan_shipment",
    "compute_load_metrics",
    "compute_crush_risk",
    "Collision",
    "CollisionChecker",
    "PlanExporter",
]
