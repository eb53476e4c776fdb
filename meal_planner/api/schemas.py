# meal_planner/api/schemas.py
from __future__ import annotations

from dataclasses import asdict
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from meal_planner.core.config import (
    MAX_EXCLUDED_TAGS,
    MAX_MEALS,
    MAX_PERSONS,
    MAX_SHOPPING_RECIPES,
    MAX_TAG_LENGTH,
    HISTORY_LIMIT,
)
from meal_planner.domain.entities import (
    CategoryDistribution,
    GenerationConstraints,
    Ingredient,
    NutritionInfo,
    Recipe,
    RegenerationConstraints,
    ShoppingList,
)

RecipeCategory = Literal["economique", "gourmand", "plaisir"]
ShoppingCategory = Literal[
    "fruits-legumes", "viandes-poissons", "produits-laitiers", "epicerie",
    "boulangerie", "surgeles", "boissons", "condiments", "autre",
]
TimeFilter = Literal["quick", "medium", "long", "any"]
Tag = Annotated[str, Field(max_length=MAX_TAG_LENGTH)]
RecipeName = Annotated[str, Field(max_length=200)]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# -------------------------
# Recipes (shopping-list input)
# -------------------------
class IngredientIn(_CamelModel):
    name: str = Field(min_length=1, max_length=200)
    quantity: float
    unit: str = Field(default="", max_length=50)
    category: ShoppingCategory = "autre"


class NutritionIn(_CamelModel):
    calories: float = 0
    proteins: float = 0
    carbs: float = 0
    fats: float = 0
    fiber: float = 0


class RecipeIn(_CamelModel):
    id: str = Field(max_length=100)
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    category: RecipeCategory
    preparation_time: int = Field(default=0, ge=0, alias="preparationTime")
    ingredients: List[IngredientIn] = Field(default_factory=list, max_length=50)
    steps: List[str] = Field(default_factory=list, max_length=30)
    price_per_person: float = Field(ge=0, alias="pricePerPerson")
    nutrition: NutritionIn = Field(default_factory=NutritionIn)

    def to_entity(self) -> Recipe:
        return Recipe(
            id=self.id,
            name=self.name,
            description=self.description,
            category=self.category,
            preparation_time=self.preparation_time,
            ingredients=tuple(
                Ingredient(name=i.name, quantity=i.quantity, unit=i.unit, category=i.category)
                for i in self.ingredients
            ),
            steps=tuple(self.steps),
            price_per_person=self.price_per_person,
            nutrition=NutritionInfo(**self.nutrition.model_dump()),
        )


# -------------------------
# Requests
# -------------------------
class CategoryDistributionIn(_CamelModel):
    economique: int = Field(default=0, ge=0, le=MAX_MEALS)
    gourmand: int = Field(default=0, ge=0, le=MAX_MEALS)
    plaisir: int = Field(default=0, ge=0, le=MAX_MEALS)


class GenerateRecipesRequest(_CamelModel):
    meals_count: int = Field(ge=1, le=MAX_MEALS, alias="mealsCount")
    categories: CategoryDistributionIn
    persons_count: int = Field(ge=1, le=MAX_PERSONS, alias="personsCount")
    excluded_tags: List[Tag] = Field(default_factory=list, max_length=MAX_EXCLUDED_TAGS, alias="excludedTags")
    time_filter: Optional[TimeFilter] = Field(default=None, alias="timeFilter")
    healthy: bool = False
    previous_recipe_names: List[RecipeName] = Field(
        default_factory=list, max_length=HISTORY_LIMIT, alias="previousRecipeNames"
    )

    @model_validator(mode="after")
    def _distribution_matches_count(self) -> "GenerateRecipesRequest":
        c = self.categories
        if c.economique + c.gourmand + c.plaisir != self.meals_count:
            raise ValueError("categories must sum to mealsCount")
        return self

    def to_constraints(self) -> GenerationConstraints:
        return GenerationConstraints(
            meals_count=self.meals_count,
            categories=CategoryDistribution(**self.categories.model_dump()),
            persons_count=self.persons_count,
            excluded_tags=list(self.excluded_tags),
            time_filter=self.time_filter,
            healthy=self.healthy,
            previous_recipe_names=list(self.previous_recipe_names),
        )


class RegenerateRecipeRequest(_CamelModel):
    index: int = Field(default=0, ge=0, lt=MAX_MEALS)
    category: RecipeCategory
    persons_count: int = Field(ge=1, le=MAX_PERSONS, alias="personsCount")
    excluded_tags: List[Tag] = Field(default_factory=list, max_length=MAX_EXCLUDED_TAGS, alias="excludedTags")
    time_filter: Optional[TimeFilter] = Field(default=None, alias="timeFilter")
    healthy: bool = False
    current_recipe_name: Optional[RecipeName] = Field(default=None, alias="currentRecipeName")
    existing_recipe_names: List[RecipeName] = Field(
        default_factory=list, max_length=HISTORY_LIMIT, alias="existingRecipeNames"
    )

    def to_constraints(self) -> RegenerationConstraints:
        return RegenerationConstraints(
            index=self.index,
            category=self.category,
            persons_count=self.persons_count,
            excluded_tags=list(self.excluded_tags),
            time_filter=self.time_filter,
            healthy=self.healthy,
            current_recipe_name=self.current_recipe_name,
            existing_recipe_names=list(self.existing_recipe_names),
        )


class ShoppingListRequest(_CamelModel):
    recipes: List[RecipeIn] = Field(max_length=MAX_SHOPPING_RECIPES)
    persons_count: int = Field(ge=1, le=MAX_PERSONS, alias="personsCount")


class StoreComparisonRequest(_CamelModel):
    total_estimated_price: float = Field(ge=0, alias="totalEstimatedPrice")


# -------------------------
# Response payloads (camelCase, as the browser client expects)
# -------------------------
def recipe_to_dict(r: Recipe) -> Dict[str, Any]:
    return {
        "id": r.id,
        "name": r.name,
        "description": r.description,
        "category": r.category,
        "preparationTime": r.preparation_time,
        "ingredients": [asdict(i) for i in r.ingredients],
        "steps": list(r.steps),
        "pricePerPerson": r.price_per_person,
        "nutrition": asdict(r.nutrition),
    }


def shopping_list_to_dict(s: ShoppingList) -> Dict[str, Any]:
    return {
        "categories": {
            cat: [
                {"name": i.name, "totalQuantity": i.total_quantity, "unit": i.unit, "category": i.category}
                for i in items
            ]
            for cat, items in s.categories.items()
        },
        "totalEstimatedPrice": s.total_estimated_price,
    }


def store_comparison_to_dict(c: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "stores": [
            {
                "name": s["name"],
                "tagline": s["tagline"],
                "priceIndex": s["price_index"],
                "qualityScore": s["quality_score"],
                "estimatedPrice": s["estimated_price"],
                "valueScore": s["value_score"],
            }
            for s in c["stores"]
        ],
        "bestValue": c["best_value"],
        "maxSaving": c["max_saving"],
    }


class ApiResponse(BaseModel):
    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    code: Optional[str] = None
