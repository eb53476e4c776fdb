# meal_planner/application/usecases.py
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional

from meal_planner.application.shopping_list import aggregate
from meal_planner.application.store_comparison import compare_stores
from meal_planner.core.config import GENERATE_MAX_TOKENS, HISTORY_LIMIT, REGENERATE_MAX_TOKENS
from meal_planner.domain.entities import (
    GenerationConstraints,
    Recipe,
    RegenerationConstraints,
    ShoppingList,
)
from meal_planner.infrastructure.history_store import HistoryEntry, HistoryStore
from meal_planner.infrastructure.llm_client import TextGenerator
from meal_planner.services.prompt_builder import build_generation_prompt, build_regeneration_prompt
from meal_planner.services.response_parser import parse_recipe, parse_recipes

log = logging.getLogger("app.usecases")


def _merge_names(*groups: Iterable[str]) -> List[str]:
    """Concatenate name lists, dropping blanks and case-insensitive repeats."""
    seen = set()
    out: List[str] = []
    for group in groups:
        for name in group or []:
            n = (name or "").strip()
            if n and n.lower() not in seen:
                seen.add(n.lower())
                out.append(n)
    return out


@dataclass(frozen=True)
class GenerateRecipes:
    generator: TextGenerator
    history: HistoryStore
    max_tokens: int = GENERATE_MAX_TOKENS

    def __call__(self, constraints: GenerationConstraints, session_id: Optional[str] = None) -> List[Recipe]:
        past = self.history.recent_names(session_id, HISTORY_LIMIT) if session_id else []
        avoid = _merge_names(constraints.previous_recipe_names, past)[:HISTORY_LIMIT]
        prompt = build_generation_prompt(replace(constraints, previous_recipe_names=avoid))

        log.info(
            "Generating %d recipes for %d person(s) (avoid=%d)",
            constraints.meals_count, constraints.persons_count, len(avoid),
        )
        recipes = parse_recipes(self.generator.generate(prompt, self.max_tokens))
        if len(recipes) != constraints.meals_count:
            log.warning("Asked for %d recipes, model returned %d", constraints.meals_count, len(recipes))

        if session_id:
            self.history.save([HistoryEntry(r.name, r.category) for r in recipes], session_id)
        return recipes


@dataclass(frozen=True)
class RegenerateRecipe:
    generator: TextGenerator
    history: HistoryStore
    max_tokens: int = REGENERATE_MAX_TOKENS

    def __call__(self, constraints: RegenerationConstraints, session_id: Optional[str] = None) -> Recipe:
        past = self.history.recent_names(session_id, HISTORY_LIMIT) if session_id else []
        existing = _merge_names(constraints.existing_recipe_names, past)[:HISTORY_LIMIT]
        prompt = build_regeneration_prompt(replace(constraints, existing_recipe_names=existing))

        log.info("Regenerating slot %d (%s)", constraints.index, constraints.category)
        recipe = parse_recipe(self.generator.generate(prompt, self.max_tokens))

        if session_id:
            self.history.save([HistoryEntry(recipe.name, recipe.category)], session_id)
        return recipe


@dataclass(frozen=True)
class BuildShoppingList:
    def __call__(self, recipes: List[Recipe], persons_count: int) -> ShoppingList:
        return aggregate(recipes, persons_count)


@dataclass(frozen=True)
class CompareStores:
    def __call__(self, total_estimated_price: float) -> Dict[str, Any]:
        return compare_stores(total_estimated_price)
