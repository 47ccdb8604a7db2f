"""
core/preferences.py
────────────────────────────────────────────────────────────────────────
Merge the stored preference fragments into one `Preferences` value.

Precedence
----------
* lists (restrictions / allergies / cuisines) are concatenated, never
  de-duplicated – matching downstream is overlap-based.
* scalars: request override → meal preferences → planning settings →
  built-in default.
* calorie target: override, else derived from activity level + goals;
  always clamped to [1500, 3000].
"""

from __future__ import annotations

import logging

from core.models import (
    MealPlanningSettings,
    MealPreferences,
    PreferenceOverrides,
    Preferences,
    UserProfile,
)

_LOG = logging.getLogger(__name__)

COOKING_TIME_MINUTES = {"quick": 30, "moderate": 60, "long": 120}
DEFAULT_COOKING_TIME = 60

ACTIVITY_CALORIES = {
    "sedentary": 1800,
    "lightly-active": 2000,
    "moderately-active": 2200,
    "very-active": 2400,
    "extremely-active": 2600,
}
DEFAULT_CALORIES = 2000
GOAL_ADJUSTMENT = 300
MIN_CALORIES, MAX_CALORIES = 1500, 3000

# energy split used when no explicit macro targets are given
_MACRO_SPLIT = {"protein": (0.30, 4), "carbs": (0.45, 4), "fat": (0.25, 9)}


def cooking_time_limit(preference: str | None) -> int:
    return COOKING_TIME_MINUTES.get(preference or "", DEFAULT_COOKING_TIME)


def clamp_calories(kcal: float) -> int:
    return int(max(MIN_CALORIES, min(MAX_CALORIES, kcal)))


def calculate_calorie_target(profile: UserProfile) -> int:
    target = ACTIVITY_CALORIES.get(profile.activity_level, DEFAULT_CALORIES)

    goals = profile.health_goals or []
    if "Weight Loss" in goals:
        target -= GOAL_ADJUSTMENT
    elif "Weight Gain" in goals or "Muscle Building" in goals:
        target += GOAL_ADJUSTMENT

    return clamp_calories(target)


def macro_targets(kcal: float) -> dict[str, float]:
    """Grams of protein / carbs / fat for a daily calorie target."""
    return {
        name: round(share * kcal / kcal_per_g, 1)
        for name, (share, kcal_per_g) in _MACRO_SPLIT.items()
    }


def merge_preferences(
    profile: UserProfile | None = None,
    meal_prefs: MealPreferences | None = None,
    planning: MealPlanningSettings | None = None,
    overrides: PreferenceOverrides | None = None,
) -> Preferences:
    profile = profile or UserProfile()
    meal_prefs = meal_prefs or MealPreferences()
    planning = planning or MealPlanningSettings()
    overrides = overrides or PreferenceOverrides()

    time_limit = overrides.cooking_time_limit or cooking_time_limit(
        meal_prefs.cooking_time_preference or planning.cooking_time_preference
    )

    if overrides.calorie_target:
        kcal = clamp_calories(overrides.calorie_target)
    else:
        kcal = calculate_calorie_target(profile)

    macros = macro_targets(kcal)
    include_snacks = (
        planning.include_snacks
        if overrides.include_snacks is None
        else overrides.include_snacks
    )

    merged = Preferences(
        dietary_restrictions=(
            *profile.dietary_restrictions,
            *(overrides.dietary_restrictions or []),
        ),
        allergies=(*profile.allergies, *(overrides.allergies or [])),
        cuisine_preferences=(
            *meal_prefs.cuisine_types,
            *planning.preferred_cuisines,
            *(overrides.cuisine_preferences or []),
        ),
        cooking_time_limit=time_limit,
        budget_range=(
            overrides.budget_range
            or meal_prefs.budget_range
            or planning.budget_range
            or "medium"
        ),
        calorie_target=kcal,
        protein_target=overrides.protein_target or macros["protein"],
        carb_target=overrides.carb_target or macros["carbs"],
        fat_target=overrides.fat_target or macros["fat"],
        include_snacks=include_snacks,
        health_goals=tuple(profile.health_goals),
        activity_level=profile.activity_level,
    )
    _LOG.debug("merged preferences: %s", merged)
    return merged
