# meal_planner/core/errors.py
from __future__ import annotations


class MealPlannerError(Exception):
    """Base class for failures the HTTP layer maps to a response."""

    code = "internal_error"


class UpstreamError(MealPlannerError):
    """The generation API was unreachable, timed out, or returned no text."""

    code = "upstream_error"


class ParseError(MealPlannerError):
    """The generation API answered, but not with the documented JSON schema."""

    code = "parse_error"
