# tests/test_nutrition.py
from datetime import date

from conftest import make_recipe
from core.models import DailyMealPlan, Meal, NutritionSummary
from core.nutrition import summarize_day, summarize_week, total_calories

R1 = make_recipe("a", calories_per_serving=400, protein_g=20, carbs_g=40, fat_g=10,
                 fibre_g=4, sugar_g=5, sodium_mg=300)
R2 = make_recipe("b", calories_per_serving=600, protein_g=30, carbs_g=60, fat_g=20,
                 fibre_g=6, sugar_g=7, sodium_mg=500)


def _meal(recipe_id: str, kcal: float) -> Meal:
    return Meal(
        id=f"m-{recipe_id}", meal_plan_id="p", recipe_id=recipe_id, meal_type="lunch",
        scheduled_date=date(2024, 1, 1), scheduled_time="13:00", calories=kcal,
    )


def test_summarize_day_sums_per_serving_values():
    s = summarize_day([_meal("a", 400), _meal("b", 600)], {"a": R1, "b": R2})
    assert s == NutritionSummary(
        calories=1000, protein=50, carbs=100, fat=30, fiber=10, sugar=12, sodium=800
    )


def test_unknown_recipe_is_skipped():
    s = summarize_day([_meal("a", 400), _meal("ghost", 999)], {"a": R1})
    assert s.calories == 400
    # total_calories works off the meal copy, not the recipe lookup
    assert total_calories([_meal("a", 400), _meal("ghost", 999)]) == 1399


def test_summarize_week_averages_days():
    days = [
        DailyMealPlan(date=date(2024, 1, 1), nutrition_summary=NutritionSummary(calories=1800, protein=90)),
        DailyMealPlan(date=date(2024, 1, 2), nutrition_summary=NutritionSummary(calories=2200, protein=110)),
    ]
    avg = summarize_week(days)
    assert avg.calories == 2000
    assert avg.protein == 100
    assert summarize_week([]) == NutritionSummary()
