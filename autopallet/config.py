"""Engine settings and the declarative per-role stacking rule table."""
from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

from .models import BoxSpec, GroupPriority


@dataclass(frozen=True)
class PackingSettings:
    """Tuning constants and termination budgets of the packing engine.

    ``max_height`` is measured from the ground and includes the pallet deck;
    ``max_overhang`` applies per side on both horizontal axes.
    """

    max_height: float = 2300.0
    max_overhang: float = 200.0
    fragile_threshold: float = 7.0
    max_pallet_iterations: int = 100
    max_attempts_per_pallet: int = 1000

    def __post_init__(self) -> None:
        if self.max_height <= 0:
            raise ValueError("max_height must be positive")
        if self.max_overhang < 0:
            raise ValueError("max_overhang must be greater than or equal to zero")
        if not 0 <= self.fragile_threshold <= 10:
            raise ValueError("fragile_threshold must be between 0 and 10")
        if self.max_pallet_iterations <= 0:
            raise ValueError("max_pallet_iterations must be a positive integer")
        if self.max_attempts_per_pallet <= 0:
            raise ValueError("max_attempts_per_pallet must be a positive integer")


_INTEGER_SETTINGS = {"max_pallet_iterations", "max_attempts_per_pallet"}


def settings_from_mapping(data: Mapping[str, Any]) -> PackingSettings:
    known = {item.name for item in fields(PackingSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown settings: {', '.join(unknown)}")
    values: Dict[str, Any] = {}
    for key, value in data.items():
        try:
            values[key] = int(value) if key in _INTEGER_SETTINGS else float(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid value for setting '{key}': {value!r}") from exc
    return PackingSettings(**values)


def load_settings(path: str | Path) -> PackingSettings:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Settings file must contain a JSON object")
    return settings_from_mapping(data)


@dataclass(frozen=True)
class RoleRule:
    """Stacking flags for a product role; ``None`` keeps the box's own value."""

    no_stack_above: bool | None = None
    fragile_weight_limit: float | None = None
    can_stand_on_edge: bool | None = None
    group_priority: GroupPriority | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RoleRule":
        limit = _first(data, "fragile_weight_limit", "fragileWeightLimit")
        priority = _first(data, "group_priority", "groupPriority")
        no_stack = _first(data, "no_stack_above", "noStackAbove")
        on_edge = _first(data, "can_stand_on_edge", "canStandOnEdge")
        try:
            return cls(
                no_stack_above=None if no_stack is None else parse_flag("no_stack_above", no_stack),
                fragile_weight_limit=None if limit is None else float(limit),
                can_stand_on_edge=None if on_edge is None else parse_flag("can_stand_on_edge", on_edge),
                group_priority=None if priority is None else GroupPriority.parse(priority),
            )
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid role rule: {json.dumps(dict(data))}") from exc

    def apply(self, box: BoxSpec) -> BoxSpec:
        changes: Dict[str, Any] = {}
        if self.no_stack_above is not None:
            changes["no_stack_above"] = self.no_stack_above
        if self.fragile_weight_limit is not None:
            changes["fragile_weight_limit"] = self.fragile_weight_limit
        if self.can_stand_on_edge is not None:
            changes["can_stand_on_edge"] = self.can_stand_on_edge
        if self.group_priority is not None:
            changes["group_priority"] = self.group_priority
        return replace(box, **changes) if changes else box


class RoleRuleTable:
    """Rules keyed by ``"<product_id>:<role_index>"`` or by ``"<product_id>"``.

    A role-specific entry wins over a product-wide one.
    """

    def __init__(self, rules: Mapping[str, RoleRule] | None = None) -> None:
        self.rules: Dict[str, RoleRule] = dict(rules or {})

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RoleRuleTable":
        rules: Dict[str, RoleRule] = {}
        for role_id, raw in data.items():
            if not isinstance(raw, Mapping):
                raise ValueError(f"Rule for role '{role_id}' must be an object")
            rules[str(role_id)] = RoleRule.from_mapping(raw)
        return cls(rules)

    @staticmethod
    def role_id(product_id: str, role_index: int) -> str:
        return f"{product_id}:{role_index}"

    def lookup(self, product_id: str, role_index: int) -> RoleRule | None:
        rule = self.rules.get(self.role_id(product_id, role_index))
        if rule is not None:
            return rule
        return self.rules.get(product_id)

    def apply(self, box: BoxSpec) -> BoxSpec:
        rule = self.lookup(box.product_id, box.role_index)
        return rule.apply(box) if rule else box

    def __len__(self) -> int:
        return len(self.rules)


def load_role_rules(path: str | Path) -> RoleRuleTable:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Role rule file must contain a JSON object")
    return RoleRuleTable.from_mapping(data)


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def parse_flag(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"'{name}' must be true or false, got {value!r}")
    return value
