# meal_planner/domain/entities.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

RECIPE_CATEGORIES: Tuple[str, ...] = ("economique", "gourmand", "plaisir")

SHOPPING_CATEGORIES: Tuple[str, ...] = (
    "fruits-legumes",
    "viandes-poissons",
    "produits-laitiers",
    "epicerie",
    "boulangerie",
    "surgeles",
    "boissons",
    "condiments",
    "autre",
)


@dataclass(frozen=True)
class Ingredient:
    name: str
    quantity: float
    unit: str
    category: str


@dataclass(frozen=True)
class NutritionInfo:
    calories: float = 0.0
    proteins: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0
    fiber: float = 0.0


@dataclass(frozen=True)
class Recipe:
    id: str
    name: str
    description: str
    category: str
    preparation_time: int
    ingredients: Tuple[Ingredient, ...]
    steps: Tuple[str, ...]
    price_per_person: float
    nutrition: NutritionInfo = field(default_factory=NutritionInfo)


@dataclass(frozen=True)
class ShoppingItem:
    name: str
    total_quantity: float
    unit: str
    category: str


@dataclass(frozen=True)
class ShoppingList:
    categories: Dict[str, List[ShoppingItem]]
    total_estimated_price: float


@dataclass(frozen=True)
class CategoryDistribution:
    economique: int = 0
    gourmand: int = 0
    plaisir: int = 0


@dataclass(frozen=True)
class GenerationConstraints:
    meals_count: int
    categories: CategoryDistribution
    persons_count: int
    excluded_tags: List[str] = field(default_factory=list)
    time_filter: Optional[str] = None
    healthy: bool = False
    previous_recipe_names: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RegenerationConstraints:
    category: str
    persons_count: int
    index: int = 0
    excluded_tags: List[str] = field(default_factory=list)
    time_filter: Optional[str] = None
    healthy: bool = False
    current_recipe_name: Optional[str] = None
    existing_recipe_names: List[str] = field(default_factory=list)
