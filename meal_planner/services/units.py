# meal_planner/services/units.py
from __future__ import annotations

from typing import Dict, Tuple

MASS = "mass"
VOLUME = "volume"
OTHER = "other"

TABLESPOON = "c. à s."
TEASPOON = "c. à c."

# ----------------------------
# French unit synonyms
# ----------------------------
_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    "g": ("g", "gr", "gramme", "grammes"),
    "kg": ("kg", "kilo", "kilos", "kilogramme", "kilogrammes"),
    "ml": ("ml", "millilitre", "millilitres"),
    "cl": ("cl", "centilitre", "centilitres"),
    "dl": ("dl", "décilitre", "décilitres", "decilitre", "decilitres"),
    "l": ("l", "litre", "litres"),
    TABLESPOON: (
        TABLESPOON, "c. à soupe", "c.à.s.", "c.a.s.", "c. a s.", "cas", "cs",
        "cuillère à soupe", "cuillères à soupe", "cuillere a soupe", "cuilleres a soupe",
    ),
    TEASPOON: (
        TEASPOON, "c. à café", "c.à.c.", "c.a.c.", "c. a c.", "cac", "cc",
        "cuillère à café", "cuillères à café", "cuillere a cafe", "cuilleres a cafe",
    ),
}
_CANONICAL: Dict[str, str] = {alias: canon for canon, aliases in _SYNONYMS.items() for alias in aliases}

_MASS_TO_G: Dict[str, float] = {"g": 1.0, "kg": 1000.0}
_VOL_TO_ML: Dict[str, float] = {"ml": 1.0, "cl": 10.0, "dl": 100.0, "l": 1000.0}


def unit_family(canonical_unit: str) -> str:
    if canonical_unit in _MASS_TO_G:
        return MASS
    if canonical_unit in _VOL_TO_ML:
        return VOLUME
    return OTHER


def normalize_unit(unit: str) -> Tuple[str, str]:
    """Map a free-text unit to (canonical_unit, family); unknown units pass through lower-cased."""
    u = " ".join((unit or "").split()).lower()
    canon = _CANONICAL.get(u, u)
    return canon, unit_family(canon)


def to_base(quantity: float, canonical_unit: str) -> float:
    """Grams for mass, millilitres for volume, unchanged otherwise."""
    if canonical_unit in _MASS_TO_G:
        return quantity * _MASS_TO_G[canonical_unit]
    if canonical_unit in _VOL_TO_ML:
        return quantity * _VOL_TO_ML[canonical_unit]
    return quantity


def to_display(base_quantity: float, family: str) -> Tuple[float, str]:
    if family == MASS:
        if base_quantity >= 1000:
            return base_quantity / 1000, "kg"
        return base_quantity, "g"
    if family == VOLUME:
        if base_quantity >= 1000:
            return base_quantity / 1000, "l"
        if base_quantity >= 100:
            return base_quantity / 10, "cl"
        return base_quantity, "ml"
    raise ValueError(f"No display unit for family: {family}")
