# meal_planner/services/prompt_builder.py
from __future__ import annotations

import re
import unicodedata
from typing import Dict, Iterable, List, Optional

from meal_planner.domain.entities import GenerationConstraints, RegenerationConstraints

MAX_TAG_CHARS = 50
MAX_NAME_CHARS = 200
MAX_AVOID_NAMES = 100

# letters (accented included), digits, whitespace and hyphen survive
_RE_NOT_TAG_CHAR = re.compile(r"[^\w\s-]|_")

BUDGET_RANGES: Dict[str, str] = {
    "economique": "moins de 5€ par personne",
    "gourmand": "entre 5€ et 10€ par personne",
    "plaisir": "plus de 10€ par personne",
}

_TIME_CONSTRAINTS: Dict[str, str] = {
    "quick": (
        "CONTRAINTE DE TEMPS : Toutes les recettes doivent avoir un temps de préparation "
        "INFÉRIEUR À 20 MINUTES. Choisir des plats rapides à réaliser."
    ),
    "medium": (
        "CONTRAINTE DE TEMPS : Toutes les recettes doivent avoir un temps de préparation "
        "ENTRE 20 ET 30 MINUTES."
    ),
    "long": (
        "CONTRAINTE DE TEMPS : Toutes les recettes doivent avoir un temps de préparation "
        "SUPÉRIEUR À 60 MINUTES. Choisir des plats mijotés, braisés ou rôtis."
    ),
}

_HEALTHY_CONSTRAINT = (
    "CONTRAINTE SANTÉ : Les recettes doivent être équilibrées et bonnes pour la santé. "
    "Privilégier les légumes frais, protéines maigres (poulet, poisson, légumineuses), "
    "grains complets et bonnes graisses (huile d'olive, avocat, noix). Limiter les graisses "
    "saturées, le sucre ajouté et les produits ultra-transformés."
)

SHOPPING_CATEGORY_ENUM = (
    '"fruits-legumes" | "viandes-poissons" | "produits-laitiers" | "epicerie" | '
    '"boulangerie" | "surgeles" | "boissons" | "condiments" | "autre"'
)
UNIT_ENUM = '"g" | "ml" | "pièce(s)" | "c. à soupe" | "c. à café" | "pincée(s)"'


# ----------------------------
# Sanitization
# ----------------------------
def sanitize_tag(tag: str, max_chars: int = MAX_TAG_CHARS) -> str:
    """
    Prompt-injection mitigation for free-text values embedded in the prompt.
    Not a security boundary.
    """
    t = unicodedata.normalize("NFC", (tag or "").strip())[:max_chars]
    return _RE_NOT_TAG_CHAR.sub("", t)


def sanitize_tags(tags: Iterable[str], max_chars: int = MAX_TAG_CHARS) -> List[str]:
    return [s for s in (sanitize_tag(t, max_chars) for t in tags or []) if s]


# ----------------------------
# Prompt sections
# ----------------------------
def time_constraint(time_filter: Optional[str]) -> str:
    return _TIME_CONSTRAINTS.get(time_filter or "any", "")


def healthy_constraint(healthy: bool) -> str:
    return _HEALTHY_CONSTRAINT if healthy else ""


def avoid_section(names: Iterable[str]) -> str:
    cleaned = list(dict.fromkeys(sanitize_tags(names, MAX_NAME_CHARS)))[:MAX_AVOID_NAMES]
    if not cleaned:
        return ""
    return (
        "RECETTES DÉJÀ PROPOSÉES (ne pas les reproposer, ni de variantes trop proches) : "
        + ", ".join(cleaned)
    )


def _recipe_schema(category: str, indent: str) -> str:
    body = f"""{{
  "id": "un-id-unique",
  "name": "Nom de la recette",
  "description": "Description appétissante de la recette en 1-2 phrases.",
  "category": {category},
  "preparationTime": 30,
  "ingredients": [
    {{
      "name": "Nom de l'ingrédient",
      "quantity": 200,
      "unit": {UNIT_ENUM},
      "category": {SHOPPING_CATEGORY_ENUM}
    }}
  ],
  "steps": ["Étape 1...", "Étape 2..."],
  "pricePerPerson": 4.50,
  "nutrition": {{
    "calories": 550,
    "proteins": 30,
    "carbs": 45,
    "fats": 20,
    "fiber": 8
  }}
}}"""
    return "\n".join(indent + line if i else line for i, line in enumerate(body.splitlines()))


def _join_blocks(blocks: Iterable[str]) -> str:
    return "\n\n".join(b for b in blocks if b)


# ----------------------------
# Prompts
# ----------------------------
def build_generation_prompt(c: GenerationConstraints) -> str:
    excluded = sanitize_tags(c.excluded_tags)
    exclusions = (
        "EXCLUSIONS STRICTES (allergies/intolérances) - NE PAS utiliser ces ingrédients : "
        + ", ".join(excluded)
        if excluded
        else "Aucune exclusion alimentaire."
    )
    schema = _recipe_schema('"economique" | "gourmand" | "plaisir"', indent="    ")

    header = f"""Tu es un chef cuisinier expert en planification de repas hebdomadaires équilibrés et économiques en France.

Génère exactement {c.meals_count} recettes avec la répartition suivante :
- {c.categories.economique} recette(s) "economique" (budget : {BUDGET_RANGES["economique"]})
- {c.categories.gourmand} recette(s) "gourmand" (budget : {BUDGET_RANGES["gourmand"]})
- {c.categories.plaisir} recette(s) "plaisir" (budget : {BUDGET_RANGES["plaisir"]})

Nombre de personnes : {c.persons_count}"""

    rules = f"""RÈGLES IMPORTANTES :
1. Adapte toutes les quantités d'ingrédients pour {c.persons_count} personne(s)
2. Varie les types de plats : inclure si possible viandes, poissons, plats végétariens
3. Assure un équilibre nutritionnel global (protéines, glucides complexes, légumes)
4. Les prix doivent être réalistes pour le marché français
5. Les recettes doivent être réalisables par un cuisinier amateur
6. Chaque recette doit avoir entre 5 et 12 ingrédients
7. Chaque recette doit avoir entre 3 et 8 étapes de préparation
8. Classe chaque ingrédient dans sa catégorie de courses
9. La description doit être appétissante et donner envie, en 1 à 2 phrases"""

    output = f"""Réponds UNIQUEMENT avec un JSON valide (sans markdown, sans backticks, sans texte autour) suivant exactement ce format :
{{
  "recipes": [
    {schema}
  ]
}}"""

    return _join_blocks([
        header,
        exclusions,
        time_constraint(c.time_filter),
        healthy_constraint(c.healthy),
        avoid_section(c.previous_recipe_names),
        rules,
        output,
    ])


def build_regeneration_prompt(c: RegenerationConstraints) -> str:
    excluded = sanitize_tags(c.excluded_tags)
    exclusions = (
        "EXCLUSIONS STRICTES : " + ", ".join(excluded) if excluded else "Aucune exclusion."
    )
    avoid = list(c.existing_recipe_names or [])
    if c.current_recipe_name:
        avoid.insert(0, c.current_recipe_name)
    schema = _recipe_schema(f'"{c.category}"', indent="  ")

    header = f"""Tu es un chef cuisinier expert. Génère UNE SEULE nouvelle recette de catégorie "{c.category}" (budget : {BUDGET_RANGES[c.category]}).

Nombre de personnes : {c.persons_count}"""

    rules = f"""RÈGLES :
1. Adapte les quantités pour {c.persons_count} personne(s)
2. Prix réaliste pour le marché français
3. Recette réalisable par un amateur
4. Entre 5 et 12 ingrédients, 3 à 8 étapes
5. Équilibre nutritionnel
6. La description doit être appétissante en 1-2 phrases
7. Classe chaque ingrédient dans sa catégorie de courses"""

    output = f"""Réponds UNIQUEMENT avec un JSON valide (sans markdown, sans backticks, sans texte autour) :
{{
  "recipe": {schema}
}}"""

    return _join_blocks([
        header,
        exclusions,
        time_constraint(c.time_filter),
        healthy_constraint(c.healthy),
        avoid_section(avoid),
        rules,
        output,
    ])
