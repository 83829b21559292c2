"""Utilities to export shipment plans for rendering and shipping tools."""
from __future__ import annotations

import json
from pathlib import Path

from .models import Layer, PalletLoad, PlacementUnit, ShipmentPlan


class PlanExporter:
    def __init__(self, base_path: str | Path = "artifacts") -> None:
        self.base_path = Path(base_path)

    def to_file(self, plan: ShipmentPlan, filename: str) -> Path:
        self.base_path.mkdir(parents=True, exist_ok=True)
        path = self.base_path / filename
        path.write_text(self._serialize(plan), encoding="utf-8")
        return path

    def to_payload(self, plan: ShipmentPlan) -> bytes:
        return self._serialize(plan).encode("utf-8")

    def to_dict(self, plan: ShipmentPlan) -> dict:
        return {
            "pallet_count": len(plan.loads),
            "placed_units": plan.placed_count(),
            "truncated": plan.truncated,
            "safety_limit": (
                {"counter": plan.safety_limit.counter, "limit": plan.safety_limit.limit}
                if plan.safety_limit
                else None
            ),
            "loads": [self._load_payload(load, idx) for idx, load in enumerate(plan.loads, start=1)],
            "unplaceable": [
                {"uid": entry.unit.uid, "label": entry.unit.label, "reason": entry.reason}
                for entry in plan.unplaceable
            ],
            "remaining": [{"uid": unit.uid, "label": unit.label} for unit in plan.remaining],
        }

    def _serialize(self, plan: ShipmentPlan) -> str:
        return json.dumps(self.to_dict(plan), indent=2)

    def _load_payload(self, load: PalletLoad, index: int) -> dict:
        pallet = load.pallet
        payload = {
            "index": index,
            "pallet": {
                "key": pallet.key,
                "name": pallet.name,
                "width": pallet.width,
                "depth": pallet.depth,
                "deck_height": pallet.deck_height,
                "tare_weight": pallet.tare_weight,
            },
            "layers": [self._layer_payload(layer) for layer in load.layers],
        }
        metrics = load.metrics
        if metrics is not None:
            payload["metrics"] = {
                "total_height": metrics.total_height,
                "total_weight": metrics.total_weight,
                "load_width": metrics.load_width,
                "load_depth": metrics.load_depth,
                "efficiency": metrics.efficiency,
                "center_of_gravity": {
                    "x": metrics.center_of_gravity.x,
                    "y": metrics.center_of_gravity.y,
                    "z": metrics.center_of_gravity.z,
                },
                "cog_offset": metrics.cog_offset,
                "max_crush_risk": metrics.max_crush_risk,
            }
        return payload

    def _layer_payload(self, layer: Layer) -> dict:
        return {
            "index": layer.index,
            "y": layer.y,
            "height": layer.height,
            "placements": [self._placement_payload(unit) for unit in layer.units],
        }

    def _placement_payload(self, unit: PlacementUnit) -> dict:
        orientation = unit.orientation
        position = unit.position
        return {
            "uid": unit.uid,
            "label": unit.label,
            "product_id": unit.spec.product_id,
            "role_index": unit.spec.role_index,
            "name": unit.spec.name,
            "weight": unit.weight,
            "orientation": orientation.label,
            "rotated": orientation.rotated,
            "width": orientation.width,
            "depth": orientation.depth,
            "height": orientation.height,
            "x": position.x,
            "y": position.y,
            "z": position.z,
        }
