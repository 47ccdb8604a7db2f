"""
core/nutrition.py
────────────────────────────────────────────────────────────────────────
Day / week nutrition rollups over per-serving recipe values.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from core.models import DailyMealPlan, Meal, NutritionSummary, Recipe

# summary field → recipe attribute
_FIELDS = {
    "calories": "calories_per_serving",
    "protein": "protein_g",
    "carbs": "carbs_g",
    "fat": "fat_g",
    "fiber": "fibre_g",
    "sugar": "sugar_g",
    "sodium": "sodium_mg",
}


def summarize_day(meals: Iterable[Meal], recipes_by_id: Mapping[str, Recipe]) -> NutritionSummary:
    totals = dict.fromkeys(_FIELDS, 0.0)
    for meal in meals:
        recipe = recipes_by_id.get(meal.recipe_id)
        if recipe is None:
            continue
        for key, attr in _FIELDS.items():
            totals[key] += getattr(recipe, attr)
    return NutritionSummary(**totals)


def total_calories(meals: Iterable[Meal]) -> float:
    return sum(m.calories for m in meals)


def summarize_week(daily_plans: Sequence[DailyMealPlan]) -> NutritionSummary:
    """Average daily intake across the plan (empty plan → zeros)."""
    if not daily_plans:
        return NutritionSummary()
    n = len(daily_plans)
    return NutritionSummary(
        **{
            key: round(sum(getattr(d.nutrition_summary, key) for d in daily_plans) / n, 1)
            for key in _FIELDS
        }
    )
