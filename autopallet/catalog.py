"""Standard pallet catalog."""
from __future__ import annotations

from .models import PalletType

PALLET_TYPES: dict[str, PalletType] = {
    "AU_CHEP": PalletType("AU_CHEP", "AU CHEP", 1165.0, 1165.0, 150.0, 30.0),
    "US_STD": PalletType("US_STD", "US STND", 1016.0, 1219.0, 150.0, 20.0),
    "EU_EURO": PalletType("EU_EURO", "EU EPAL", 1200.0, 800.0, 144.0, 25.0),
    "PLASTIC_STD": PalletType("PLASTIC_STD", "Plastic Unit", 1100.0, 1000.0, 125.0, 15.0),
}

DEFAULT_PALLET = "AU_CHEP"


def get_pallet_type(key: str) -> PalletType:
    try:
        return PALLET_TYPES[key.strip().upper()]
    except KeyError as exc:
        valid = ", ".join(sorted(PALLET_TYPES))
        raise KeyError(f"Unknown pallet type '{key}'. Valid values: {valid}") from exc


def list_pallet_types() -> list[PalletType]:
    return list(PALLET_TYPES.values())
