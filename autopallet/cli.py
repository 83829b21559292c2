"""Command line interface for AutoPallet."""
from __future__ import annotations

import argparse
import json
import logging
from typing import Sequence

from .catalog import DEFAULT_PALLET, PALLET_TYPES, get_pallet_type, list_pallet_types
from .collisions import CollisionChecker
from .config import PackingSettings, RoleRuleTable, load_role_rules, load_settings
from .exporter import PlanExporter
from .manifest import expand_manifest, load_manifest
from .models import PalletLoad, ShipmentPlan
from .scheduler import MultiPalletScheduler

CRUSH_WARNING = 0.7


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="AutoPallet load planner")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    pack_parser = sub.add_parser("pack", help="Plan pallet loads for a manifest")
    pack_parser.add_argument("manifest", help="Path to the manifest JSON file")
    pack_parser.add_argument(
        "--pallet",
        default=DEFAULT_PALLET,
        choices=sorted(PALLET_TYPES),
        help="Pallet type key",
    )
    pack_parser.add_argument("--rules", help="Role rule table (JSON)")
    pack_parser.add_argument("--settings", help="Engine settings overrides (JSON)")
    pack_parser.add_argument("--export", help="Output filename for the JSON plan")
    pack_parser.add_argument("--out-dir", default="artifacts", help="Directory for exported plans")
    pack_parser.add_argument(
        "--format",
        choices=["table", "json"],
        default="table",
        help="Output format (readable summary or JSON)",
    )

    catalog_parser = sub.add_parser("catalog", help="List the available pallet types")
    catalog_parser.add_argument(
        "--format",
        choices=["table", "json"],
        default="table",
        help="Output format (table or JSON)",
    )
    catalog_parser.add_argument("--filter", help="Filter by key or name (case-insensitive)")
    return parser


def _print_table(headers: tuple[str, ...], rows: list[tuple[str, ...]]) -> None:
    widths = [len(header) for header in headers]
    for row in rows:
        for idx, cell in enumerate(row):
            widths[idx] = max(widths[idx], len(cell))
    format_str = "  ".join(f"{{:<{width}}}" for width in widths)
    print(format_str.format(*headers))
    print("  ".join("-" * width for width in widths))
    for row in rows:
        print(format_str.format(*row))


def run_catalog(args: argparse.Namespace) -> None:
    records = [
        {
            "key": pallet.key,
            "name": pallet.name,
            "width_mm": pallet.width,
            "depth_mm": pallet.depth,
            "deck_height_mm": pallet.deck_height,
            "tare_kg": pallet.tare_weight,
        }
        for pallet in list_pallet_types()
    ]
    needle = (args.filter or "").strip().lower()
    if needle:
        records = [
            record
            for record in records
            if needle in record["key"].lower() or needle in record["name"].lower()
        ]

    if args.format == "json":
        print(json.dumps(records, indent=2))
        return
    if not records:
        print("No pallet types match")
        return
    rows = [
        (
            record["key"],
            record["name"],
            f"{record['width_mm']:.0f}x{record['depth_mm']:.0f}x{record['deck_height_mm']:.0f}",
            f"{record['tare_kg']:.0f}kg",
        )
        for record in records
    ]
    _print_table(("Key", "Name", "Size (mm)", "Tare"), rows)


def _load_inputs(args: argparse.Namespace) -> tuple[list, PackingSettings]:
    try:
        items = load_manifest(args.manifest)
        rules = load_role_rules(args.rules) if args.rules else RoleRuleTable()
        settings = load_settings(args.settings) if args.settings else PackingSettings()
    except (OSError, ValueError) as exc:
        raise SystemExit(str(exc)) from exc
    return expand_manifest(items, rules), settings


def run_pack(args: argparse.Namespace) -> ShipmentPlan:
    units, settings = _load_inputs(args)
    try:
        pallet = get_pallet_type(args.pallet)
    except KeyError as exc:
        raise SystemExit(str(exc)) from exc

    plan = MultiPalletScheduler(settings).schedule(units, pallet)
    checker = CollisionChecker()
    exporter = PlanExporter(args.out_dir)

    if args.format == "json":
        print(json.dumps(exporter.to_dict(plan), indent=2))
    else:
        print(f"Pallet type: {pallet.name} ({pallet.width:.0f}x{pallet.depth:.0f}mm)")
        print(f"Units: {len(units)} expanded, {plan.placed_count()} placed on {len(plan.loads)} pallet(s)")
        for index, load in enumerate(plan.loads, start=1):
            _print_load(index, load, checker, settings)
        if plan.unplaceable:
            print("Unplaceable units:")
            for entry in plan.unplaceable:
                print(f"  - {entry.unit.label}: {entry.reason}")
        if plan.truncated:
            print(
                f"Stopped early ({plan.safety_limit.describe()}); "
                f"{len(plan.remaining)} units were not scheduled"
            )

    if args.export:
        path = exporter.to_file(plan, args.export)
        if args.format != "json":
            print(f"Plan exported to {path}")
    return plan


def _print_load(index: int, load: PalletLoad, checker: CollisionChecker, settings: PackingSettings) -> None:
    metrics = load.metrics
    print(
        "Pallet {idx}: {layers} layers, {boxes} boxes, height {height:.0f}mm, weight {weight:.1f}kg".format(
            idx=index,
            layers=load.levels(),
            boxes=load.unit_count(),
            height=metrics.total_height,
            weight=metrics.total_weight,
        )
    )
    print(
        "  Footprint: {:.0f} x {:.0f} mm, fill {:.1%}".format(
            metrics.load_width,
            metrics.load_depth,
            metrics.efficiency,
        )
    )
    print(
        "  Center of gravity: ({:.1f}, {:.1f}, {:.1f}) mm, offset {:.1f} mm".format(
            metrics.center_of_gravity.x,
            metrics.center_of_gravity.y,
            metrics.center_of_gravity.z,
            metrics.cog_offset,
        )
    )
    if metrics.max_crush_risk > CRUSH_WARNING:
        print(f"  Crush risk: {metrics.max_crush_risk:.2f}")
    for layer in load.layers:
        first = layer.units[0]
        print(
            "  Layer {idx}: {count} x {product} ({orientation}) at {y:.0f}mm, height {height:.0f}mm".format(
                idx=layer.index + 1,
                count=len(layer.units),
                product=first.spec.name or first.spec.product_id,
                orientation=first.orientation.label,
                y=layer.y,
                height=layer.height,
            )
        )
    collisions = checker.validate(load, settings)
    for collision in collisions:
        print(f"  - collision: {collision.description}")


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.command == "pack":
        run_pack(args)
    elif args.command == "catalog":
        run_catalog(args)


if __name__ == "__main__":  # pragma: no cover
    main()
