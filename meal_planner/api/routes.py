# meal_planner/api/routes.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse

from meal_planner.api.schemas import (
    ApiResponse,
    GenerateRecipesRequest,
    RegenerateRecipeRequest,
    ShoppingListRequest,
    StoreComparisonRequest,
    recipe_to_dict,
    shopping_list_to_dict,
    store_comparison_to_dict,
)
from meal_planner.core.errors import MealPlannerError, ParseError, UpstreamError

log = logging.getLogger("api.routes")
router = APIRouter()

_ERROR_MESSAGES: Dict[type, str] = {
    UpstreamError: "Le service de génération est indisponible, réessayez plus tard.",
    ParseError: "La réponse du service de génération est invalide, réessayez.",
}


# -------------------------
# Dependencies via app.state
# -------------------------
def _state(request: Request, name: str):
    uc = getattr(request.app.state, name, None)
    if uc is None:
        raise RuntimeError(f"{name} not initialized. Check app startup wiring.")
    return uc


def get_generate_uc(request: Request):
    return _state(request, "generate_uc")


def get_regenerate_uc(request: Request):
    return _state(request, "regenerate_uc")


def get_shopping_uc(request: Request):
    return _state(request, "shopping_uc")


def get_compare_uc(request: Request):
    return _state(request, "compare_uc")


def _ok(data: Dict[str, Any]) -> Dict[str, Any]:
    return {"success": True, "data": data}


def _fail(status_code: int, error: str, code: Optional[str] = None) -> JSONResponse:
    body = ApiResponse(success=False, error=error, code=code).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


def _generation_failure(where: str, e: MealPlannerError) -> JSONResponse:
    log.error("%s failed (%s): %s", where, e.code, e)
    return _fail(502, _ERROR_MESSAGES.get(type(e), "Erreur du service de génération."), e.code)


# -------------------------
# Routes
# -------------------------
@router.get("/api/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@router.post("/api/recipes/generate", response_model=ApiResponse)
def generate(
    req: GenerateRecipesRequest,
    uc=Depends(get_generate_uc),
    x_session_id: Optional[str] = Header(default=None, max_length=100),
) -> Any:
    try:
        recipes = uc(req.to_constraints(), session_id=x_session_id)
    except MealPlannerError as e:
        return _generation_failure("/generate", e)
    return _ok({"recipes": [recipe_to_dict(r) for r in recipes]})


@router.post("/api/recipes/regenerate", response_model=ApiResponse)
def regenerate(
    req: RegenerateRecipeRequest,
    uc=Depends(get_regenerate_uc),
    x_session_id: Optional[str] = Header(default=None, max_length=100),
) -> Any:
    try:
        recipe = uc(req.to_constraints(), session_id=x_session_id)
    except MealPlannerError as e:
        return _generation_failure("/regenerate", e)
    return _ok({"recipe": recipe_to_dict(recipe)})


@router.post("/api/recipes/shopping-list", response_model=ApiResponse)
def shopping_list(req: ShoppingListRequest, uc=Depends(get_shopping_uc)) -> Any:
    result = uc([r.to_entity() for r in req.recipes], req.persons_count)
    return _ok(shopping_list_to_dict(result))


@router.post("/api/recipes/store-comparison", response_model=ApiResponse)
def store_comparison(req: StoreComparisonRequest, uc=Depends(get_compare_uc)) -> Any:
    return _ok(store_comparison_to_dict(uc(req.total_estimated_price)))
