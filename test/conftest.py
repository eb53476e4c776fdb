from __future__ import annotations

import json
from typing import List, Optional

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from meal_planner.domain.entities import Ingredient, NutritionInfo, Recipe


def make_recipe(
    name: str = "Gratin dauphinois",
    category: str = "economique",
    price: float = 4.5,
    ingredients: Optional[List[Ingredient]] = None,
) -> Recipe:
    return Recipe(
        id=name.lower().replace(" ", "-"),
        name=name,
        description="Un classique.",
        category=category,
        preparation_time=45,
        ingredients=tuple(ingredients or ()),
        steps=("Préchauffer le four.", "Cuire."),
        price_per_person=price,
        nutrition=NutritionInfo(calories=550, proteins=20, carbs=45, fats=25, fiber=4),
    )


def recipe_doc(name: str = "Poulet basquaise", category: str = "gourmand", price: float = 6.2) -> dict:
    return {
        "id": name.lower().replace(" ", "-"),
        "name": name,
        "description": "Poulet mijoté aux poivrons.",
        "category": category,
        "preparationTime": 50,
        "ingredients": [
            {"name": "Poulet", "quantity": 800, "unit": "g", "category": "viandes-poissons"},
            {"name": "Poivron", "quantity": 3, "unit": "pièce(s)", "category": "fruits-legumes"},
            {"name": "Huile d'olive", "quantity": 2, "unit": "c. à soupe", "category": "epicerie"},
        ],
        "steps": ["Couper les poivrons.", "Dorer le poulet.", "Mijoter 40 minutes."],
        "pricePerPerson": price,
        "nutrition": {"calories": 480, "proteins": 38, "carbs": 18, "fats": 22, "fiber": 5},
    }


class FakeGenerator:
    """Records prompts and replays canned model output."""

    def __init__(self, reply: str = "", error: Optional[Exception] = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: List[tuple] = []

    def generate(self, prompt: str, max_tokens: int) -> str:
        self.calls.append((prompt, max_tokens))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def batch_reply() -> str:
    docs = [recipe_doc("Poulet basquaise"), recipe_doc("Lentilles corail", "economique", 2.8)]
    return "```json\n" + json.dumps({"recipes": docs}, ensure_ascii=False) + "\n```"


@pytest.fixture
def single_reply() -> str:
    return json.dumps({"recipe": recipe_doc("Risotto aux cèpes", "plaisir", 11.5)}, ensure_ascii=False)


class DownCollection:
    """Collection whose every call fails like an unreachable server."""

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise ServerSelectionTimeoutError("no servers available")
        return fail
