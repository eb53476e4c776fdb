# meal_planner/core/config.py
from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

load_dotenv()

# Generation API (Anthropic Messages)
ANTHROPIC_API_KEY: str = os.getenv("ANTHROPIC_API_KEY", "")
ANTHROPIC_BASE_URL: str = os.getenv("ANTHROPIC_BASE_URL", "")
ANTHROPIC_MODEL: str = os.getenv("ANTHROPIC_MODEL", "claude-haiku-4-5-20251001")
GENERATION_TIMEOUT_S: float = float(os.getenv("GENERATION_TIMEOUT_S", "120"))
GENERATE_MAX_TOKENS: int = int(os.getenv("GENERATE_MAX_TOKENS", "8192"))
REGENERATE_MAX_TOKENS: int = int(os.getenv("REGENERATE_MAX_TOKENS", "4096"))

# Recipe history. Empty MONGO_URI -> in-memory store.
MONGO_URI: str = os.getenv("MONGO_URI", "")
MONGO_DB: str = os.getenv("MONGO_DB", "meal_planner")
MONGO_HISTORY_COL: str = os.getenv("MONGO_HISTORY_COL", "recipe_history")
HISTORY_LIMIT: int = int(os.getenv("HISTORY_LIMIT", "100"))
HISTORY_TTL_SECONDS: int = int(os.getenv("HISTORY_TTL_SECONDS", str(7 * 24 * 3600)))

# HTTP
FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:5173")
PORT: int = int(os.getenv("PORT", "3001"))

# Request limits
MAX_MEALS: int = 14
MAX_PERSONS: int = 20
MAX_EXCLUDED_TAGS: int = 20
MAX_TAG_LENGTH: int = 100
MAX_SHOPPING_RECIPES: int = 30

# Global logging (module-level loggers inherit this)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
