# meal_planner/application/shopping_list.py
from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from meal_planner.domain.entities import SHOPPING_CATEGORIES, Recipe, ShoppingItem, ShoppingList
from meal_planner.services.units import MASS, VOLUME, normalize_unit, to_base, to_display

log = logging.getLogger("app.shopping_list")


# ----------------------------
# French collation
# ----------------------------
# NFD leaves ligatures whole
_LIGATURES = str.maketrans({"œ": "oe", "æ": "ae"})


def _strip_accents(s: str) -> str:
    s = unicodedata.normalize("NFD", s)
    return "".join(ch for ch in s if unicodedata.category(ch) != "Mn")


def french_sort_key(name: str) -> Tuple[str, str, str]:
    """
    Primary level ignores accents and case so "échalote" sorts beside "echalote"
    and "Œufs" beside "oeufs", not after "z". Accents then case break ties.
    """
    folded = (name or "").strip().casefold()
    return _strip_accents(folded.translate(_LIGATURES)), folded, name or ""


# ----------------------------
# Aggregation
# ----------------------------
@dataclass
class _Accumulated:
    name: str
    base_quantity: float
    family: str
    unit: str
    category: str


def _merge_key(name: str, unit: str, family: str) -> Tuple[str, str]:
    normalized_name = (name or "").strip().lower()
    if family in (MASS, VOLUME):
        return normalized_name, family
    return normalized_name, unit


def empty_buckets() -> Dict[str, List[ShoppingItem]]:
    return {cat: [] for cat in SHOPPING_CATEGORIES}


def aggregate(recipes: Iterable[Recipe], persons_count: int) -> ShoppingList:
    """
    Merge the ingredients of every recipe into one categorized shopping list.

    Ingredients sharing a name merge when their units belong to the same family
    (mass or volume, summed in grams / millilitres) or, for any other unit, when
    the unit is identical. The first ingredient seen under a key decides the
    display name and the shopping category.
    """
    recipes = list(recipes)
    acc: Dict[Tuple[str, str], _Accumulated] = {}

    for recipe in recipes:
        for ing in recipe.ingredients:
            unit, family = normalize_unit(ing.unit)
            key = _merge_key(ing.name, unit, family)
            base_qty = to_base(float(ing.quantity), unit)

            item = acc.get(key)
            if item is None:
                acc[key] = _Accumulated(
                    name=ing.name,
                    base_quantity=base_qty,
                    family=family,
                    unit=unit,
                    category=ing.category,
                )
                continue

            item.base_quantity += base_qty
            if ing.category != item.category:
                log.warning(
                    "Category conflict for %r: keeping %s, ignoring %s (recipe %s)",
                    item.name, item.category, ing.category, recipe.name,
                )

    buckets = empty_buckets()
    for item in acc.values():
        if item.family in (MASS, VOLUME):
            quantity, unit = to_display(item.base_quantity, item.family)
        else:
            quantity, unit = item.base_quantity, item.unit

        category = item.category if item.category in buckets else "autre"
        buckets[category].append(
            ShoppingItem(
                name=item.name,
                total_quantity=round(quantity, 2),
                unit=unit,
                category=category,
            )
        )

    for items in buckets.values():
        items.sort(key=lambda x: french_sort_key(x.name))

    total = sum(r.price_per_person * persons_count for r in recipes)
    return ShoppingList(categories=buckets, total_estimated_price=round(total, 2))
