# meal_planner/services/response_parser.py
from __future__ import annotations

import json
import logging
import math
import re
import uuid
from typing import Any, Dict, List

from meal_planner.core.errors import ParseError
from meal_planner.domain.entities import (
    RECIPE_CATEGORIES,
    SHOPPING_CATEGORIES,
    Ingredient,
    NutritionInfo,
    Recipe,
)

log = logging.getLogger("services.response_parser")

_RE_LANG_TAG = re.compile(r"^[A-Za-z][\w+-]*(?=[\s{\[])")


def extract_structured_payload(raw: str) -> str:
    """
    Models are told to answer with bare JSON but sometimes wrap it in a
    markdown fence anyway (```json ... ```). Return the fence interior if any.
    """
    text = raw or ""
    start = text.find("```")
    if start == -1:
        return text.strip()
    end = text.find("```", start + 3)
    if end == -1:
        return text.strip()

    inner = text[start + 3:end]
    # drop an optional language tag on the opening line
    inner = _RE_LANG_TAG.sub("", inner, count=1)
    return inner.strip()


def _decode(raw: str) -> Dict[str, Any]:
    payload = extract_structured_payload(raw)
    try:
        doc = json.loads(payload)
    except json.JSONDecodeError as e:
        log.error("Model output is not valid JSON: %s", e)
        log.debug("Model output: %s", raw)
        raise ParseError(f"Model output is not valid JSON: {e}") from e
    if not isinstance(doc, dict):
        raise ParseError("Model output is not a JSON object")
    return doc


def _as_float(v: Any, default: float = 0.0) -> float:
    if v is None or v == "":
        return default
    f = float(v)
    # json.loads accepts NaN / Infinity
    if not math.isfinite(f):
        raise ValueError(f"non-finite number {v!r}")
    return f


def _parse_ingredient(doc: Dict[str, Any]) -> Ingredient:
    category = str(doc.get("category") or "autre").strip()
    if category not in SHOPPING_CATEGORIES:
        category = "autre"
    return Ingredient(
        name=str(doc["name"]).strip(),
        quantity=_as_float(doc.get("quantity")),
        unit=str(doc.get("unit") or "").strip(),
        category=category,
    )


def parse_recipe_document(doc: Dict[str, Any]) -> Recipe:
    """Cast one decoded recipe object into a Recipe, or raise ParseError."""
    if not isinstance(doc, dict):
        raise ParseError("Recipe entry is not a JSON object")
    try:
        category = str(doc.get("category") or "").strip()
        if category not in RECIPE_CATEGORIES:
            raise ValueError(f"unknown recipe category {category!r}")
        nutrition = doc.get("nutrition") or {}
        return Recipe(
            id=str(doc.get("id") or uuid.uuid4().hex),
            name=str(doc["name"]).strip(),
            description=str(doc.get("description") or "").strip(),
            category=category,
            preparation_time=int(_as_float(doc.get("preparationTime"))),
            ingredients=tuple(_parse_ingredient(i) for i in (doc.get("ingredients") or [])),
            steps=tuple(str(s) for s in (doc.get("steps") or [])),
            price_per_person=round(_as_float(doc.get("pricePerPerson")), 2),
            nutrition=NutritionInfo(
                calories=_as_float(nutrition.get("calories")),
                proteins=_as_float(nutrition.get("proteins")),
                carbs=_as_float(nutrition.get("carbs")),
                fats=_as_float(nutrition.get("fats")),
                fiber=_as_float(nutrition.get("fiber")),
            ),
        )
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
        raise ParseError(f"Invalid recipe document: {e}") from e


def parse_recipes(raw: str) -> List[Recipe]:
    doc = _decode(raw)
    items = doc.get("recipes")
    if not isinstance(items, list):
        raise ParseError("Model output lacks a 'recipes' list")
    return [parse_recipe_document(x) for x in items]


def parse_recipe(raw: str) -> Recipe:
    doc = _decode(raw)
    if "recipe" not in doc:
        raise ParseError("Model output lacks a 'recipe' object")
    return parse_recipe_document(doc["recipe"])
