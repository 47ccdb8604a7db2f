# tests/conftest.py
from __future__ import annotations

from datetime import date
from typing import Any, Callable, List, Sequence

import pytest

from core.errors import PersistenceError
from core.models import (
    Meal,
    MealPlanningSettings,
    MealPreferences,
    Recipe,
    UserProfile,
    WeeklyMealPlan,
)


def make_recipe(rid: str, **kw: Any) -> Recipe:
    data: dict[str, Any] = dict(
        id=rid,
        name=f"Recipe {rid}",
        prep_time_minutes=10,
        cook_time_minutes=15,
        difficulty="easy",
        tags=["any-meal"],
        calories_per_serving=500,
        protein_g=20,
        carbs_g=50,
        fat_g=15,
        fibre_g=5,
        sugar_g=6,
        sodium_mg=400,
    )
    data.update(kw)
    return Recipe(**data)


class MemoryStore:
    """In-memory MealPlanStore; `fail_on` dates raise like a broken insert."""

    def __init__(self, fail_on: Sequence[date] = ()) -> None:
        self.plans: List[WeeklyMealPlan] = []
        self.meals: List[Meal] = []
        self.calls: List[str] = []
        self._fail_on = set(fail_on)

    async def create_plan(self, plan: WeeklyMealPlan) -> None:
        self.calls.append("create_plan")
        self.plans.append(plan)

    async def insert_meals(self, day: date, meals: Sequence[Meal]) -> None:
        self.calls.append(f"insert:{day.isoformat()}")
        if day in self._fail_on:
            raise PersistenceError(day, "connection reset")
        self.meals.extend(meals)


class MemorySource:
    def __init__(
        self,
        recipes: Sequence[Recipe],
        profile: UserProfile | None = None,
        meal_prefs: MealPreferences | None = None,
        planning: MealPlanningSettings | None = None,
    ) -> None:
        self.recipes = list(recipes)
        self.profile = profile
        self.meal_prefs = meal_prefs
        self.planning = planning
        self.calls: List[str] = []

    async def get_profile(self, user_id: str) -> UserProfile | None:
        self.calls.append("profile")
        return self.profile

    async def get_meal_preferences(self, user_id: str) -> MealPreferences | None:
        self.calls.append("meal_prefs")
        return self.meal_prefs

    async def get_planning_settings(self, user_id: str) -> MealPlanningSettings | None:
        self.calls.append("planning")
        return self.planning

    async def load_recipes(self, max_prep_minutes: int) -> List[Recipe]:
        self.calls.append("recipes")
        return [r for r in self.recipes if r.prep_time_minutes <= max_prep_minutes]


def weekly_corpus(n: int = 50) -> List[Recipe]:
    """`n` recipes cycling breakfast / lunch / dinner / main-course tags."""
    kinds = [
        (["breakfast"], 480),
        (["lunch"], 690),
        (["dinner"], 810),
        (["main-course"], 750),
    ]
    out = []
    for i in range(n):
        tags, kcal = kinds[i % len(kinds)]
        out.append(
            make_recipe(
                f"r{i:02d}",
                tags=tags + (["contains-nuts"] if i % 10 == 9 else []),
                calories_per_serving=kcal + (i % 5) * 10,
            )
        )
    return out


@pytest.fixture
def recipe() -> Callable[..., Recipe]:
    return make_recipe


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def corpus() -> List[Recipe]:
    return weekly_corpus()
