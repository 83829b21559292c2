"""Manifest loading and quantity expansion into placement units."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

from .config import RoleRuleTable, parse_flag
from .models import BoxSpec, Dimensions, GroupPriority, PlacementUnit


@dataclass(frozen=True)
class ManifestItem:
    product_id: str
    quantity: int
    boxes: List[BoxSpec]
    name: str = ""


def parse_box(product_id: str, role_index: int, raw: Mapping[str, Any], name: str = "") -> BoxSpec:
    try:
        width = float(raw["width"])
        depth = float(raw["depth"])
        height = float(raw["height"])
        weight = float(raw["weight"])
        fragile = float(raw.get("fragile_rating", raw.get("fragileRating", 0.0)))
        rigidity = float(raw.get("rigidity_rating", raw.get("rigidityRating", 10.0)))
        limit = raw.get("fragile_weight_limit", raw.get("fragileWeightLimit"))
        on_edge = raw.get("allow_edge", raw.get("allowEdge", raw.get("can_stand_on_edge", False)))
        box = BoxSpec(
            product_id=product_id,
            role_index=role_index,
            dimensions=Dimensions(width, depth, height),
            weight=weight,
            fragile_rating=fragile,
            rigidity_rating=rigidity,
            can_stand_on_edge=parse_flag("allow_edge", on_edge),
            no_stack_above=parse_flag("no_stack_above", raw.get("no_stack_above", raw.get("noStackAbove", False))),
            group_priority=GroupPriority.parse(raw.get("group_priority", raw.get("groupPriority"))),
            fragile_weight_limit=None if limit is None else float(limit),
            force_rotation=parse_flag("force_rotation", raw.get("force_rotation", raw.get("forceRotation", False))),
            name=name,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid box specification for {product_id}: {json.dumps(dict(raw))}") from exc
    if any(value <= 0 for value in (width, depth, height, weight)):
        raise ValueError(f"Box {product_id}:{role_index} needs positive dimensions and weight")
    if not (0 <= fragile <= 10 and 0 <= rigidity <= 10):
        raise ValueError(f"Box {product_id}:{role_index} ratings must be between 0 and 10")
    return box


def parse_manifest(data: Mapping[str, Any]) -> List[ManifestItem]:
    raw_items = data.get("items")
    if not isinstance(raw_items, list) or not raw_items:
        raise ValueError("Manifest must contain a non-empty 'items' list")
    items: List[ManifestItem] = []
    for raw in raw_items:
        try:
            product_id = str(raw["product_id"])
            quantity = int(raw.get("quantity", 1))
            raw_boxes = raw["boxes"]
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Invalid manifest item: {json.dumps(raw)}") from exc
        if quantity <= 0:
            raise ValueError(f"Quantity of {product_id} must be positive")
        if not isinstance(raw_boxes, list) or not raw_boxes:
            raise ValueError(f"Product {product_id} must list at least one box")
        name = str(raw.get("name", product_id))
        boxes = [parse_box(product_id, index, box, name) for index, box in enumerate(raw_boxes)]
        items.append(ManifestItem(product_id=product_id, quantity=quantity, boxes=boxes, name=name))
    return items


def load_manifest(path: str | Path) -> List[ManifestItem]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Manifest file must contain a JSON object")
    return parse_manifest(data)


def expand_manifest(items: Iterable[ManifestItem], rules: RoleRuleTable | None = None) -> List[PlacementUnit]:
    """Expand quantities into units with monotonically assigned ids.

    Units are emitted role by role: every product's first box, then every
    product's second box, and so on.
    """

    items = list(items)
    rules = rules or RoleRuleTable()
    max_roles = max((len(item.boxes) for item in items), default=0)
    resolved: Dict[tuple[str, int], BoxSpec] = {}
    units: List[PlacementUnit] = []
    for role_index in range(max_roles):
        for item in items:
            if role_index >= len(item.boxes):
                continue
            key = (item.product_id, role_index)
            if key not in resolved:
                resolved[key] = rules.apply(item.boxes[role_index])
            spec = resolved[key]
            for copy in range(item.quantity):
                units.append(
                    PlacementUnit(
                        uid=len(units),
                        label=f"{item.product_id}-q{copy}-box{role_index}",
                        spec=spec,
                    )
                )
    return units


def single_box_units(spec: BoxSpec, quantity: int, *, start_uid: int = 0) -> List[PlacementUnit]:
    """Expand one box spec without a manifest, mainly for programmatic callers."""

    return [
        PlacementUnit(
            uid=start_uid + copy,
            label=f"{spec.product_id}-q{copy}-box{spec.role_index}",
            spec=spec,
        )
        for copy in range(quantity)
    ]
