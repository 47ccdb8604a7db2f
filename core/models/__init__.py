"""Re-export the domain models for easy imports."""

from .plan import (
    DailyMealPlan,
    DayPersistenceFailure,
    GenerationResult,
    GroceryItem,
    Meal,
    MealSlot,
    MealType,
    NutritionSummary,
    WeeklyMealPlan,
)
from .preferences import (
    MealPlanningSettings,
    MealPreferences,
    PreferenceOverrides,
    Preferences,
    UserProfile,
)
from .recipe import Recipe

__all__ = [
    "DailyMealPlan",
    "DayPersistenceFailure",
    "GenerationResult",
    "GroceryItem",
    "Meal",
    "MealSlot",
    "MealType",
    "NutritionSummary",
    "WeeklyMealPlan",
    "MealPlanningSettings",
    "MealPreferences",
    "PreferenceOverrides",
    "Preferences",
    "UserProfile",
    "Recipe",
]
