# meal_planner/application/store_comparison.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple


@dataclass(frozen=True)
class Store:
    name: str
    price_index: float  # relative to a reference basket (Auchan = 1.00)
    quality_score: float  # out of 10
    tagline: str


# Price indices: Que Choisir (2024), LSA Conso. Quality: Shopper Observer (BVA).
STORES: Tuple[Store, ...] = (
    Store("Lidl", 0.80, 7.0, "Discounteur, MDD dominante"),
    Store("Leclerc", 0.90, 8.0, "Leader prix hypers France"),
    Store("Auchan", 1.00, 8.3, "Large gamme, rayon Bio solide"),
    Store("Carrefour", 1.05, 7.8, "N°1 mondial, gamme étendue"),
)


def compare_stores(total_estimated_price: float, stores: Tuple[Store, ...] = STORES) -> Dict[str, Any]:
    """Naive basket estimate per grocery chain: total x chain price index."""
    estimates: List[Dict[str, Any]] = [
        {
            "name": s.name,
            "tagline": s.tagline,
            "price_index": s.price_index,
            "quality_score": s.quality_score,
            "estimated_price": round(total_estimated_price * s.price_index, 2),
            "value_score": round(s.quality_score / s.price_index, 1),
        }
        for s in stores
    ]
    estimates.sort(key=lambda x: x["estimated_price"])

    if not estimates:
        return {"stores": [], "best_value": None, "max_saving": 0.0}

    best_value = max(estimates, key=lambda x: x["value_score"])
    max_saving = round(estimates[-1]["estimated_price"] - estimates[0]["estimated_price"], 2)
    return {"stores": estimates, "best_value": best_value["name"], "max_saving": max_saving}
