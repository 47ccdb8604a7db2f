"""
core/errors.py
────────────────────────────────────────────────────────────────────────
Failures raised by the meal-plan pipeline. The API layer maps each class
to an HTTP status; everything else propagates untouched.
"""
from __future__ import annotations

from datetime import date


class MealPlanError(Exception):
    """Base class for every expected generation failure."""


class InputError(MealPlanError):
    """Missing or malformed request input (user id / start date)."""


class NoMatchError(MealPlanError):
    """Neither the strict nor the broad recipe search produced candidates."""

    def __init__(
        self,
        message: str = (
            "No recipes found matching your preferences. "
            "Please adjust your dietary restrictions or preferences."
        ),
    ) -> None:
        super().__init__(message)


class PersistenceError(MealPlanError):
    """A day's meal batch could not be written."""

    def __init__(self, day: date, message: str) -> None:
        super().__init__(f"failed to store meals for {day.isoformat()}: {message}")
        self.day = day


class MealNotFoundError(MealPlanError):
    """A meal id given to a plan mutation does not exist."""
