# tests/test_plan_builder.py
from __future__ import annotations

import asyncio
import math
import random
from collections import Counter
from datetime import date, timedelta

import pytest

from conftest import MemoryStore, make_recipe
from core.models import Preferences
from core.plan_builder import (
    DEFAULT_MEAL_IMAGES,
    WeeklyPlanBuilder,
    is_suitable,
    meal_image,
    score_candidates,
    select_recipe,
    slots_for,
)
from core.recipe_filter import RecipeFilter

START = date(2024, 1, 1)
PREFS = Preferences(
    allergies=("nuts",),
    cooking_time_limit=60,
    calorie_target=2000,
    include_snacks=False,
)


def _build(candidates, prefs=PREFS, store=None, seed=7):
    store = store or MemoryStore()
    builder = WeeklyPlanBuilder(store, rng=random.Random(seed))
    return asyncio.run(builder.build("user-1", candidates, prefs, START)), store


# ── slots ───────────────────────────────────────────────────────────
def test_slot_ratios():
    assert [s.meal_type for s in slots_for(False)] == ["breakfast", "lunch", "dinner"]
    assert math.isclose(sum(s.calorie_ratio for s in slots_for(False)), 1.0)
    # snack is extra headroom on top of the three main meals
    assert math.isclose(sum(s.calorie_ratio for s in slots_for(True)), 1.1)
    assert slots_for(True)[-1].time == "15:30"


# ── suitability ─────────────────────────────────────────────────────
@pytest.mark.parametrize(
    "tags, name, meal_type, expected",
    [
        (["Breakfast"], "x", "breakfast", True),
        (["any-meal"], "x", "snack", True),
        ([], "Big Breakfast Burrito", "breakfast", True),
        (["main-course"], "x", "lunch", True),
        (["main-course"], "x", "dinner", True),
        (["main-course"], "x", "breakfast", False),
        (["light"], "x", "snack", True),
        (["dinner"], "x", "lunch", False),
    ],
)
def test_is_suitable(tags, name, meal_type, expected):
    assert is_suitable(make_recipe("r", tags=tags, name=name), meal_type) is expected


# ── scoring ─────────────────────────────────────────────────────────
def test_score_formula():
    r = make_recipe(
        "r", calories_per_serving=600, difficulty="medium",
        prep_time_minutes=20, cook_time_minutes=40, tags=["italian"],
    )
    plain = score_candidates([r], 500)["score"].iloc[0]
    expected = (1 - 100 / 500) * 0.4 + 0.7 * 0.3 + (1 - 60 / 120) * 0.3
    assert math.isclose(plain, expected)

    bonus = score_candidates([r], 500, ["Ital"])["score"].iloc[0]
    assert math.isclose(bonus, expected * 1.2)


def test_calorie_score_is_not_clamped():
    r = make_recipe("huge", calories_per_serving=2000, prep_time_minutes=0, cook_time_minutes=0)
    assert score_candidates([r], 500)["score"].iloc[0] < 0


def test_select_recipe_picks_among_top_three():
    target = 500
    recipes = [make_recipe(f"r{i}", calories_per_serving=500 + i * 50) for i in range(8)]
    picks = {
        select_recipe(recipes, "lunch", target, frozenset(), PREFS, random.Random(s)).id
        for s in range(60)
    }
    assert picks == {"r0", "r1", "r2"}


def test_select_recipe_skips_used_and_falls_back_to_any_unused():
    recipes = [make_recipe("b", tags=["breakfast"]), make_recipe("d", tags=["dinner"])]
    rng = random.Random(1)
    assert select_recipe(recipes, "breakfast", 500, frozenset(), PREFS, rng).id == "b"
    # no breakfast left → random unused recipe
    assert select_recipe(recipes, "breakfast", 500, frozenset({"b"}), PREFS, rng).id == "d"
    assert select_recipe(recipes, "breakfast", 500, frozenset({"b", "d"}), PREFS, rng) is None


def test_plan_day_threads_used_ids():
    recipes = [make_recipe(f"r{i}") for i in range(5)]
    builder = WeeklyPlanBuilder(MemoryStore(), rng=random.Random(0))
    meals, used = builder.plan_day("p", START, recipes, PREFS, frozenset({"r0"}))
    assert len(meals) == 3
    assert "r0" not in {m.recipe_id for m in meals}
    assert used == {"r0"} | {m.recipe_id for m in meals}


def test_meals_without_picture_get_slot_default():
    recipes = [make_recipe("pic", image_url="https://img/pic.jpg"), make_recipe("bare")]
    builder = WeeklyPlanBuilder(MemoryStore(), rng=random.Random(0))
    meals, _ = builder.plan_day("p", START, recipes, PREFS, frozenset())
    images = {m.recipe_id: (m.meal_type, m.image_url) for m in meals}
    assert images["pic"][1] == "https://img/pic.jpg"
    meal_type, url = images["bare"]
    assert url == DEFAULT_MEAL_IMAGES[meal_type]


def test_meal_image_unknown_type_uses_lunch_picture():
    assert meal_image("brunch", None) == DEFAULT_MEAL_IMAGES["lunch"]


# ── whole week ──────────────────────────────────────────────────────
def test_week_example_scenario(corpus):
    candidates = RecipeFilter(corpus).filter(PREFS)
    result, store = _build(candidates)
    plan = result.plan

    assert len(plan.daily_plans) == 7
    assert [d.date for d in plan.daily_plans] == [START + timedelta(days=i) for i in range(7)]
    nut_ids = {r.id for r in corpus if "contains-nuts" in r.tags}
    for day in plan.daily_plans:
        assert [m.meal_type for m in day.meals] == ["breakfast", "lunch", "dinner"]
        assert [m.scheduled_time for m in day.meals] == ["08:00", "13:00", "19:00"]
        assert not nut_ids & {m.recipe_id for m in day.meals}
        assert day.total_calories == sum(m.calories for m in day.meals)
        # roughly 500 / 700 / 800
        assert 1700 <= day.total_calories <= 2300

    assert result.fully_persisted
    assert len(store.meals) == 21
    assert store.calls[0] == "create_plan"


def test_no_recipe_repeats_across_week(corpus):
    for seed in range(10):
        result, _ = _build(corpus, prefs=Preferences(include_snacks=True), seed=seed)
        ids = [m.recipe_id for d in result.plan.daily_plans for m in d.meals]
        assert len(ids) == 28
        assert max(Counter(ids).values()) == 1


def test_same_seed_same_plan(corpus):
    a, _ = _build(corpus, seed=42)
    b, _ = _build(corpus, seed=42)
    pick = lambda res: [m.recipe_id for d in res.plan.daily_plans for m in d.meals]
    assert pick(a) == pick(b)


def test_small_corpus_leaves_slots_empty():
    recipes = [make_recipe(f"r{i}") for i in range(5)]
    result, store = _build(recipes)
    counts = [len(d.meals) for d in result.plan.daily_plans]
    assert counts == [3, 2, 0, 0, 0, 0, 0]
    assert len(result.plan.daily_plans) == 7
    # empty days are not written
    assert store.calls == ["create_plan", "insert:2024-01-01", "insert:2024-01-02"]


def test_failed_day_insert_does_not_stop_generation(corpus):
    store = MemoryStore(fail_on=[START + timedelta(days=2)])
    result, _ = _build(corpus, store=store)

    assert len(result.plan.daily_plans) == 7
    assert all(len(d.meals) == 3 for d in result.plan.daily_plans)
    assert not result.fully_persisted
    [failure] = result.persistence_failures
    assert failure.date == START + timedelta(days=2)
    assert failure.meal_count == 3
    assert "connection reset" in failure.error
    assert len(store.meals) == 18


def test_nutrition_summary_matches_recipes():
    recipes = [
        make_recipe("b", tags=["breakfast"], calories_per_serving=400, protein_g=10, sodium_mg=100),
        make_recipe("l", tags=["lunch"], calories_per_serving=600, protein_g=30, sodium_mg=200),
        make_recipe("d", tags=["dinner"], calories_per_serving=800, protein_g=40, sodium_mg=300),
    ]
    result, _ = _build(recipes)
    day = result.plan.daily_plans[0]
    assert day.total_calories == 1800
    assert day.nutrition_summary.calories == 1800
    assert day.nutrition_summary.protein == 80
    assert day.nutrition_summary.sodium == 600
    assert result.plan.grocery_list == []
