from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo import MongoClient

from meal_planner.api.routes import router
from meal_planner.core import config
from meal_planner.application.usecases import (
    BuildShoppingList,
    CompareStores,
    GenerateRecipes,
    RegenerateRecipe,
)
from meal_planner.infrastructure.history_store import (
    HistoryStore,
    InMemoryHistoryStore,
    MongoHistoryStore,
)
from meal_planner.infrastructure.llm_client import AnthropicTextGenerator, TextGenerator

log = logging.getLogger("app")


def _build_history(app: FastAPI) -> HistoryStore:
    if not config.MONGO_URI:
        log.warning("MONGO_URI not set: recipe history kept in memory only")
        return InMemoryHistoryStore(ttl_seconds=config.HISTORY_TTL_SECONDS)
    client = MongoClient(config.MONGO_URI, serverSelectionTimeoutMS=3000)
    app.state.mongo_client = client
    return MongoHistoryStore(client[config.MONGO_DB][config.MONGO_HISTORY_COL])


def create_app(
    generator: Optional[TextGenerator] = None,
    history: Optional[HistoryStore] = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        on_startup(app)
        yield
        if app.state.mongo_client:
            app.state.mongo_client.close()

    def on_startup(app: FastAPI) -> None:
        if not config.ANTHROPIC_API_KEY and generator is None:
            log.warning("ANTHROPIC_API_KEY not set: generation endpoints will fail")
        gen = generator if generator is not None else AnthropicTextGenerator()
        hist = history if history is not None else _build_history(app)

        # DI for routes.py
        app.state.generate_uc = GenerateRecipes(generator=gen, history=hist)
        app.state.regenerate_uc = RegenerateRecipe(generator=gen, history=hist)
        app.state.shopping_uc = BuildShoppingList()
        app.state.compare_uc = CompareStores()
        log.info("Startup complete")

    app = FastAPI(title="Meal Planner API", lifespan=lifespan)
    app.state.mongo_client = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.FRONTEND_URL],
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "X-Session-Id", "Authorization"],
        allow_credentials=True,
    )

    @app.exception_handler(RequestValidationError)
    async def on_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        msg = first.get("msg", "invalid request")
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": f"{field}: {msg}" if field else msg, "code": "validation_error"},
        )

    @app.exception_handler(Exception)
    async def on_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        log.exception("Processing %s error", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Une erreur interne est survenue.", "code": "internal_error"},
        )

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=config.PORT, reload=False)
